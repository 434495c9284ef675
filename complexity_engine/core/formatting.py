from complexity_engine.core.constants import HAZARD_SOURCE_PREFIX

SOURCE_LABELS = {
    "groundTruth": "Ground truth",
    "ruleEngine": "Rule engine",
    "default": "Conservative default",
    "claim": "Claim",
    "complexityEngine": "Complexity engine",
    "patternDetection": "Pattern detection",
}


def format_time(seconds: float) -> str:
    """
    Format time in the most appropriate unit:
    - <1μs: ns
    - <1ms: μs
    - <1s: ms
    - >=1s: s
    Args:
        seconds: Time in seconds
    Returns:
        Formatted time string with unit
    """
    if seconds < 1e-6:
        return f"{seconds * 1e9:.2f} ns"
    elif seconds < 1e-3:
        return f"{seconds * 1e6:.2f} μs"
    elif seconds < 1:
        return f"{seconds * 1000:.2f} ms"
    else:
        return f"{seconds:.6f} s"


def format_confidence(confidence: float) -> str:
    """
    Format a [0, 1] confidence as a whole percentage.
    Args:
        confidence: Confidence value
    Returns:
        Percentage string (e.g., "95%")
    """
    return f"{round(confidence * 100)}%"


def format_source(source: str) -> str:
    """Human readable label for a result source."""
    if source.startswith(HAZARD_SOURCE_PREFIX):
        name = source[len(HAZARD_SOURCE_PREFIX) :].replace("_", " ")
        return f"Known algorithm ({name})"
    return SOURCE_LABELS.get(source, source)


def format_pattern(pattern: str) -> str:
    """Turn a snake_case pattern id into a title."""
    if not pattern:
        return "-"
    return pattern.replace("_", " ").title()
