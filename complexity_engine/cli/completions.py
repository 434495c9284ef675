"""
Autocompletion functions for complexity-engine.
"""

from typing import List

from complexity_engine.analysis.languages import list_profiles
from complexity_engine.analysis.ground_truth import load_database


class Completions:
    """Autocompletion provider for complexity-engine."""

    @staticmethod
    def languages(incomplete: str) -> List[str]:
        """Complete language names and aliases."""
        names = []
        for profile in list_profiles():
            names.append(profile.name)
            names.extend(profile.aliases)
        return [name for name in names if name.startswith(incomplete.lower())]

    @staticmethod
    def problems(incomplete: str) -> List[str]:
        """Complete ground truth problem ids."""
        ids = [entry.id for entry in load_database().entries]
        return sorted(i for i in ids if i.startswith(incomplete.lower()))
