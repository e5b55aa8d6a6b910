"""
Helper Utilities Module.

Small generic functions shared across the job sheet extraction system.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - normalize_line_endings: Fold CR/CRLF line breaks into LF
"""

from pathlib import Path
from typing import Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/jobs")
        PosixPath('outputs/jobs')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def normalize_line_endings(text: str) -> str:
    """
    Convert Windows and old Mac line breaks to plain newlines.

    OCR output pasted from different sources mixes these freely, and the
    field patterns treat ``\\n`` as the only line terminator.

    Example:
        >>> normalize_line_endings("Bike: Trek\\r\\nNotes: ok")
        'Bike: Trek\\nNotes: ok'
    """
    return text.replace('\r\n', '\n').replace('\r', '\n')
