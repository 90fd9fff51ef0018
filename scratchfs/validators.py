"""
ScratchFS argument validators.

These validators check caller-supplied names and paths before any filesystem access.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import os
from pathlib import Path


# Methods --------------------------------------------------------------------------------------------------------------

def validate_name(name: str | None, message: str) -> str:
    """
    Validate that a name argument is a non-empty string.

    Args:
        name: The caller-supplied file or directory name.
        message: Error message used when validation fails.

    Returns:
        The name unchanged.

    Raises:
        ValueError: If name is None or empty.

    Examples:
        >>> validate_name("data.txt", "File name argument cannot be null or empty")
        'data.txt'
        >>> validate_name("", "File name argument cannot be null or empty")
        Traceback (most recent call last):
            ...
        ValueError: File name argument cannot be null or empty
    """
    if name is None or name == "":
        raise ValueError(message)
    return name


def validate_path(path: str | os.PathLike[str] | None, message: str) -> Path:
    """
    Validate a path argument and convert it to a Path.

    Text paths and PathLike objects must not be None and must not render as an empty string.

    Raises:
        ValueError: If path is None or its file system representation is empty.
    """
    if path is None or os.fspath(path) == "":
        raise ValueError(message)
    return Path(path)
