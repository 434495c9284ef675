"""
Main Typer app and command definitions for complexity-engine.
"""

from typing import Optional

import typer

from .completions import Completions
from .decorators import with_error_handling
from .handlers import CommandHandlers
from .options import resolve_options

# Create main typer app
app = typer.Typer(
    help="Complexity Engine - deterministic Big-O analysis of code snippets",
    add_completion=True,
    rich_markup_mode="markdown",
)


# ---- Commands ----


@app.command()
@with_error_handling
def analyze(
    source: str = typer.Argument(..., help="Source file to analyze, or '-' for stdin"),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Programming language",
        autocompletion=Completions.languages,
    ),
    title: Optional[str] = typer.Option(
        None,
        "--title",
        "-t",
        help="Problem title (enables ground truth lookup)",
        autocompletion=Completions.problems,
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    output_path: Optional[str] = typer.Option(
        None, "--output", "-o", help="Save the JSON result to a file"
    ),
    config: Optional[str] = typer.Option(None, "--config", help="Config file"),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to a file"),
):
    """Analyze the time and space complexity of a code snippet."""
    options = resolve_options(
        language_override=language,
        config_override=config,
        debug_override=debug,
        verbose_override=verbose,
        log_file_override=log_file,
    )

    CommandHandlers.handle_analyze(options, source, title, as_json, output_path)


@app.command()
@with_error_handling
def validate(
    source: str = typer.Argument(..., help="Source file, or '-' for stdin"),
    claimed_time: str = typer.Option(..., "--time", help="Claimed time complexity, e.g. 'O(n)'"),
    claimed_space: str = typer.Option(..., "--space", help="Claimed space complexity, e.g. 'O(1)'"),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Programming language",
        autocompletion=Completions.languages,
    ),
    title: Optional[str] = typer.Option(
        None, "--title", "-t", help="Problem title", autocompletion=Completions.problems
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    config: Optional[str] = typer.Option(None, "--config", help="Config file"),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to a file"),
):
    """Check a claimed complexity against the engine's own analysis."""
    options = resolve_options(
        language_override=language,
        config_override=config,
        debug_override=debug,
        verbose_override=verbose,
        log_file_override=log_file,
    )

    validation = CommandHandlers.handle_validate(
        options, source, claimed_time, claimed_space, title, as_json
    )
    if not validation.valid:
        raise typer.Exit(code=1)


@app.command()
@with_error_handling
def triple(
    triple_path: str = typer.Argument(
        ..., help="JSON file with 'code' and 'claimed' brute/better/optimal triples"
    ),
    title: Optional[str] = typer.Option(
        None, "--title", "-t", help="Problem title", autocompletion=Completions.problems
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language",
        "-l",
        help="Programming language",
        autocompletion=Completions.languages,
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    output_path: Optional[str] = typer.Option(
        None, "--output", "-o", help="Save the JSON result to a file"
    ),
    config: Optional[str] = typer.Option(None, "--config", help="Config file"),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to a file"),
):
    """Validate a brute force / better / optimal triple."""
    options = resolve_options(
        language_override=language,
        config_override=config,
        debug_override=debug,
        verbose_override=verbose,
        log_file_override=log_file,
    )

    CommandHandlers.handle_triple(options, triple_path, title, as_json, output_path)


@app.command()
@with_error_handling
def lookup(
    title: str = typer.Argument(..., help="Problem title, e.g. 'Two Sum'", autocompletion=Completions.problems),
    as_json: bool = typer.Option(False, "--json", help="Print the entry as JSON"),
    config: Optional[str] = typer.Option(None, "--config", help="Config file"),
    debug: bool = typer.Option(False, "--debug", help="Debug mode"),
):
    """Show the ground truth entry for a problem."""
    options = resolve_options(config_override=config, debug_override=debug)

    if not CommandHandlers.handle_lookup(options, title, as_json):
        raise typer.Exit(code=1)


@app.command()
@with_error_handling
def languages():
    """List supported languages and their aliases."""
    CommandHandlers.handle_languages()


if __name__ == "__main__":
    app()
