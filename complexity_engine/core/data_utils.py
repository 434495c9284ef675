import json
from typing import Dict, List, Optional, Union

from complexity_engine.core.logging import log_file_operation, log_warning


def load_json(
    file_path: str, default: Optional[Union[List, Dict]] = None
) -> Union[List, Dict]:
    """
    Load JSON data from a file, returning a default value if it doesn't exist or is invalid.
    Args:
        file_path: Path to JSON file
        default: Default value to return if file doesn't exist or is invalid
    Returns:
        Parsed JSON data or default value
    """
    log_file_operation("read", file_path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return default if default is not None else {}
    except json.JSONDecodeError as e:
        log_warning(f"Could not decode JSON from {file_path}: {e}")
        return default if default is not None else {}


def save_json(file_path: str, data: Union[List, Dict]) -> None:
    """
    Save data to a JSON file.
    Args:
        file_path: Path to save JSON file
        data: Data to save
    Raises:
        IOError: If file cannot be written
    """
    log_file_operation("write", file_path)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def read_source(file_path: str) -> str:
    """Read a source file as UTF-8, replacing undecodable bytes."""
    log_file_operation("read", file_path)
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()
