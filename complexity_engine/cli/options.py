"""
Resolved options and configuration handling for complexity-engine.
"""

from dataclasses import dataclass
from typing import Optional

from complexity_engine.analysis.languages import resolve_language
from complexity_engine.core.config import EngineConfig, load_config_file, set_config
from complexity_engine.core.exceptions import ConfigurationError
from complexity_engine.core.logging import configure_logging, log_debug, log_info


@dataclass
class ResolvedOptions:
    """Container for resolved CLI options."""

    language: str
    debug: bool
    verbose: bool
    log_file: Optional[str]
    config: EngineConfig


def resolve_options(
    language_override: Optional[str] = None,
    config_override: Optional[str] = None,
    debug_override: bool = False,
    verbose_override: bool = False,
    log_file_override: Optional[str] = None,
) -> ResolvedOptions:
    """Resolves options based on command args, config files, and defaults."""
    config_data = load_config_file(config_override)
    try:
        config = EngineConfig.from_dict(config_data)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    # Command-line flags override config
    if debug_override:
        config.debug = True
    if verbose_override:
        config.verbose = True
    if log_file_override:
        config.log_file = log_file_override

    configure_logging(debug=config.debug, verbose=config.verbose, log_file=config.log_file)
    log_debug(f"Loaded config file: {config_override or 'default locations'}")

    if language_override:
        log_debug(f"Resolving language from override: {language_override}")
        language = resolve_language(language_override, strict=True)
    else:
        log_debug(f"Using language from config: {config.analysis.default_language}")
        language = resolve_language(config.analysis.default_language, strict=True)

    set_config(config)

    resolved = ResolvedOptions(
        language=language,
        debug=config.debug,
        verbose=config.verbose,
        log_file=config.log_file,
        config=config,
    )
    log_info("Options resolved", language=resolved.language)
    return resolved
