"""
Helper Utilities Module.

Small filesystem and time helpers shared by the CLI, the input handler
and the receipt store.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Union

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> Path:
    """Create ``path`` (and parents) if missing and return it as a Path."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_file_extension(filepath: PathLike) -> str:
    """
    Lowercase extension with its dot, or "" when there is none.

    Example:
        >>> get_file_extension("scans/RECEIPT.JPG")
        '.jpg'
    """
    return Path(filepath).suffix.lower()


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S") -> str:
    """Current local time formatted for use in file names."""
    return datetime.now().strftime(format_str)


def collect_files(
    directory: PathLike,
    extensions: Iterable[str],
    recursive: bool = False
) -> List[Path]:
    """
    Collect files with the given extensions from a directory.

    Extensions are compared case-insensitively, so "scan.PNG" matches
    ".png". The result is sorted for a stable processing order.

    Args:
        directory: Directory to scan.
        extensions: Extensions including the dot (e.g. ".png").
        recursive: Whether to descend into subdirectories.

    Returns:
        Sorted list of matching file paths.
    """
    wanted = {ext.lower() for ext in extensions}
    candidates = Path(directory).rglob("*") if recursive else Path(directory).iterdir()

    return sorted(
        path for path in candidates
        if path.is_file() and get_file_extension(path) in wanted
    )
