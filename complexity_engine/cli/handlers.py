"""
Command handlers for complexity-engine - business logic separated from CLI interface.
"""

import os
import sys
import time
from typing import Any, Dict, Optional

from complexity_engine import output
from complexity_engine.analysis import analyze, validate_against_claim, validate_triple
from complexity_engine.analysis.ground_truth import entry_summary, load_database
from complexity_engine.analysis.languages import list_profiles
from complexity_engine.analysis.models import ApproachTriple, CodeTriple
from complexity_engine.core.data_utils import load_json, read_source, save_json
from complexity_engine.core.exceptions import ValidationError
from complexity_engine.core.logging import log_context, log_info, logged_operation

from .options import ResolvedOptions


def _read_code(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    if not os.path.isfile(source):
        raise ValidationError(f"Source file not found: {source}")
    return read_source(source)


def _emit(data: Dict[str, Any], output_path: Optional[str]):
    if output_path:
        save_json(output_path, data)
        log_info(f"Saved result to {output_path}")


class CommandHandlers:
    """Handles the business logic for CLI commands."""

    @staticmethod
    @logged_operation("analyze_command")
    def handle_analyze(
        options: ResolvedOptions,
        source: str,
        title: Optional[str],
        as_json: bool,
        output_path: Optional[str],
    ):
        """Handle the analyze command."""
        code = _read_code(source)
        with log_context(language=options.language, problem=title):
            start = time.perf_counter()
            result = analyze(
                code,
                language=options.language,
                problem_title=title,
                config=options.config,
            )
            duration = time.perf_counter() - start

        _emit(result.to_dict(), output_path)
        if as_json:
            output.console.print_json(data=result.to_dict())
        else:
            output.print_analysis(result, title=title, duration=duration)
        return result

    @staticmethod
    @logged_operation("validate_command")
    def handle_validate(
        options: ResolvedOptions,
        source: str,
        claimed_time: str,
        claimed_space: str,
        title: Optional[str],
        as_json: bool,
    ):
        """Handle the validate command."""
        code = _read_code(source)
        validation = validate_against_claim(
            code,
            language=options.language,
            claimed_time=claimed_time,
            claimed_space=claimed_space,
            config=options.config,
            problem_title=title,
        )
        if as_json:
            output.console.print_json(data=validation.to_dict())
        else:
            output.print_claim_validation(validation)
        return validation

    @staticmethod
    @logged_operation("triple_command")
    def handle_triple(
        options: ResolvedOptions,
        triple_path: str,
        title: Optional[str],
        as_json: bool,
        output_path: Optional[str],
    ):
        """Handle the triple command."""
        if not os.path.isfile(triple_path):
            raise ValidationError(f"Triple file not found: {triple_path}")
        data = load_json(triple_path)
        if not isinstance(data, dict) or "claimed" not in data:
            raise ValidationError("Triple file must be an object with a 'claimed' triple")

        title = title or data.get("title")
        code = CodeTriple.from_dict(data.get("code"))
        claimed = ApproachTriple.from_dict(data["claimed"])
        log_info(f"Validating triple with approaches: {', '.join(claimed.present()) or 'none'}")

        result = validate_triple(
            title,
            code,
            claimed,
            language=options.language,
            config=options.config,
        )

        _emit(result.to_dict(), output_path)
        if as_json:
            output.console.print_json(data=result.to_dict())
        else:
            output.print_consensus(result, problem_title=title)
        return result

    @staticmethod
    def handle_lookup(options: ResolvedOptions, title: str, as_json: bool) -> bool:
        """Handle the lookup command. Returns False when nothing matches."""
        database = load_database(options.config.ground_truth.extra_dataset)
        entry = database.find_by_title(title)
        if entry is None:
            output.print_warning(f"No ground truth entry for '{title}'")
            return False

        summary = entry_summary(entry)
        if as_json:
            output.console.print_json(data=summary)
        else:
            output.print_ground_truth_entry(summary)
        return True

    @staticmethod
    def handle_languages():
        """Handle the languages command."""
        output.print_languages(list_profiles())
