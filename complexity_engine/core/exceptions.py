class ComplexityEngineError(Exception):
    """Base exception for all complexity engine errors."""

    pass


class ConfigurationError(ComplexityEngineError):
    """Raised when configuration is invalid or missing."""

    pass


class LanguageError(ConfigurationError):
    """Raised when a language tag cannot be resolved."""

    pass


class GroundTruthError(ComplexityEngineError):
    """Raised when the ground truth dataset fails validation."""

    pass


class ValidationError(ComplexityEngineError):
    """Raised when claim or triple input is malformed."""

    pass
