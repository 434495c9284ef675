from .engine import analyze, validate_against_claim, validate_triple
from .features import extract
from .ground_truth import load_database, lookup
from .hazards import match_hazard
from .models import (
    Approach,
    ApproachTriple,
    ClaimValidation,
    CodeTriple,
    ComplexityResult,
    ConsensusResult,
    FeatureSet,
)
from .patterns import analyze_patterns

__all__ = [
    "analyze",
    "validate_against_claim",
    "validate_triple",
    "extract",
    "lookup",
    "load_database",
    "match_hazard",
    "analyze_patterns",
    "Approach",
    "ApproachTriple",
    "ClaimValidation",
    "CodeTriple",
    "ComplexityResult",
    "ConsensusResult",
    "FeatureSet",
]
