"""
Constants used throughout the application.
"""

# File names
CONFIG_FILENAME = "complexity_engine_config.json"
GROUND_TRUTH_FILENAME = "ground_truth.json"

DEFAULT_LANGUAGE = "python"
FALLBACK_LANGUAGE = "javascript"

# Language configuration
# NOTE: These are populated by the language registry
SUPPORTED_LANGUAGES = set()  # Will be populated by language profiles
LANGUAGE_ALIASES = {}  # Will be populated by language profiles

# Result sources
SOURCE_GROUND_TRUTH = "groundTruth"
SOURCE_RULE_ENGINE = "ruleEngine"
SOURCE_DEFAULT = "default"
SOURCE_CLAIM = "claim"
HAZARD_SOURCE_PREFIX = "hazard:"

# Consensus layers, in priority order
LAYER_GROUND_TRUTH = "groundTruth"
LAYER_ENGINE = "complexityEngine"
LAYER_PATTERN = "patternDetection"
LAYER_CLAIM = "claim"

LAYER_PRIORITIES = {
    LAYER_GROUND_TRUTH: 1,
    LAYER_ENGINE: 2,
    LAYER_PATTERN: 3,
    LAYER_CLAIM: 4,
}

# Approach keys of a brute/better/optimal triple
APPROACHES = ("brute_force", "better", "optimal")
