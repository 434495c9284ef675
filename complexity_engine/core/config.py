import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from complexity_engine.core.constants import CONFIG_FILENAME, DEFAULT_LANGUAGE

# Configuration defaults - all constants at the top
GROUND_TRUTH_CONFIDENCE = 1.0
FINGERPRINT_CONFIDENCE = 0.95
ENGINE_CONFIDENCE = 0.9
CLAIM_CONFIDENCE = 0.7
PATTERN_CORRECTION_THRESHOLD = 0.9
FINGERPRINT_THRESHOLD = 0.5

# Global configuration instance
_config: Optional["EngineConfig"] = None


@dataclass
class AnalysisConfig:
    """Switches for the single-snippet analysis pipeline."""

    default_language: str = DEFAULT_LANGUAGE
    hazards_enabled: bool = True
    amortized_feedback: bool = True
    safety_enabled: bool = True


@dataclass
class ConsensusConfig:
    """Layer confidences used when reconciling a brute/better/optimal triple."""

    ground_truth_confidence: float = GROUND_TRUTH_CONFIDENCE
    engine_confidence: float = ENGINE_CONFIDENCE
    claim_confidence: float = CLAIM_CONFIDENCE
    pattern_threshold: float = PATTERN_CORRECTION_THRESHOLD


@dataclass
class GroundTruthConfig:
    """Ground truth dataset configuration."""

    enabled: bool = True
    extra_dataset: Optional[str] = None  # Merged over the bundled dataset
    fingerprint_threshold: float = FINGERPRINT_THRESHOLD
    fingerprint_confidence: float = FINGERPRINT_CONFIDENCE


@dataclass
class EngineConfig:
    """Main configuration class for the complexity engine."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    consensus: ConsensusConfig = field(default_factory=ConsensusConfig)
    ground_truth: GroundTruthConfig = field(default_factory=GroundTruthConfig)
    debug: bool = False
    verbose: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> "EngineConfig":
        """Load configuration from file."""
        config_data = load_config_file(config_path)
        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Create config from dictionary."""
        config_data = data.copy()

        # Map flat JSON keys to config fields
        field_mapping = {
            "default_language": "analysis.default_language",
            "hazards_enabled": "analysis.hazards_enabled",
            "amortized_feedback": "analysis.amortized_feedback",
            "safety_enabled": "analysis.safety_enabled",
            "ground_truth_enabled": "ground_truth.enabled",
            "ground_truth_path": "ground_truth.extra_dataset",
            "fingerprint_threshold": "ground_truth.fingerprint_threshold",
            "engine_confidence": "consensus.engine_confidence",
            "claim_confidence": "consensus.claim_confidence",
            "pattern_threshold": "consensus.pattern_threshold",
        }

        # Process mapped fields
        for json_key, config_key in field_mapping.items():
            if json_key in config_data:
                value = config_data.pop(json_key)
                if "." in config_key:  # Nested field
                    parent, child = config_key.split(".", 1)
                    if parent not in config_data:
                        config_data[parent] = {}
                    config_data[parent][child] = value
                else:
                    config_data[config_key] = value

        # Handle nested configurations
        if "analysis" in config_data and isinstance(config_data["analysis"], dict):
            config_data["analysis"] = AnalysisConfig(**config_data["analysis"])

        if "consensus" in config_data and isinstance(config_data["consensus"], dict):
            config_data["consensus"] = ConsensusConfig(**config_data["consensus"])

        if "ground_truth" in config_data:
            if isinstance(config_data["ground_truth"], dict):
                config_data["ground_truth"] = GroundTruthConfig(
                    **config_data["ground_truth"]
                )
            elif isinstance(config_data["ground_truth"], bool):
                config_data["ground_truth"] = GroundTruthConfig(
                    enabled=config_data["ground_truth"]
                )

        return cls(**config_data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = Path.home() / f".{CONFIG_FILENAME}"

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def load_config_file(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from file."""
    paths = []

    if config_path:
        paths.append(Path(config_path))

    paths.extend(
        [
            Path.cwd() / CONFIG_FILENAME,
            Path.home() / f".{CONFIG_FILENAME}",
        ]
    )

    for path in paths:
        if path.exists():
            try:
                with open(path, "r") as f:
                    return json.load(f)
            except (json.JSONDecodeError, IOError):
                continue

    return {}


def get_config() -> EngineConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = EngineConfig()
    return _config


def set_config(config: Optional[EngineConfig]) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
