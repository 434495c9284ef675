from complexity_engine.analysis import (
    analyze,
    validate_against_claim,
    validate_triple,
)
from complexity_engine.analysis.models import ApproachTriple, CodeTriple, ComplexityResult


__all__ = [
    "analyze",
    "validate_against_claim",
    "validate_triple",
    "ApproachTriple",
    "CodeTriple",
    "ComplexityResult",
]
