"""
Filesystem primitives behind the scratch directory helpers.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import os
import shutil
from pathlib import Path


# Methods --------------------------------------------------------------------------------------------------------------

def clean_dir(path: str | os.PathLike[str]) -> list[str]:
    """
    Removes all contents from a directory, leaving the directory empty.

    Recursively deletes all files, subdirectories, and symlinks within
    the directory, but preserves the directory itself (including its
    permissions and metadata).

    Args:
        path: Directory to empty.

    Returns:
        list[str]: Sorted names of the entries that were removed.

    Raises:
        FileNotFoundError: If path doesn't exist.
        NotADirectoryError: If path exists but is not a directory.
        PermissionError: If lacking permission to delete contents.
        OSError: If deletion fails for other reasons.

    Examples:
        >>> clean_dir("build/test-files")
        ['a.txt', 'child']
    """
    dir_path = Path(path)

    if not dir_path.exists():
        raise FileNotFoundError(f"Directory not found: {dir_path}")

    if not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")

    removed = []
    for item in sorted(dir_path.iterdir()):
        if item.is_dir() and not item.is_symlink():
            # Directory (not a symlink to a directory)
            shutil.rmtree(item)
        else:
            # File or symlink (including symlinks to directories)
            item.unlink()
        removed.append(item.name)
    return removed


def copy_file(src: str | os.PathLike[str], dst: str | os.PathLike[str]) -> Path:
    """
    Copy a single file to an exact destination path, preserving timestamps and permissions.

    Args:
        src: Source file path.
        dst: Destination file path. An existing file is overwritten.

    Returns:
        Path: Absolute path to the destination file.

    Raises:
        IsADirectoryError: If src or dst is a directory.
        ValueError: If src and dst are the same file.

    Notes:
        - Parent directories of dst are created if they don't exist.
        - FileNotFoundError, PermissionError and other OSError instances are propagated
          from the underlying shutil calls.
    """
    src = Path(src)
    dst = Path(dst)

    if src.is_dir():
        raise IsADirectoryError(f"Source is a directory, not a file: {src}")
    if dst.is_dir():
        raise IsADirectoryError(f"Destination is a directory, not a file: {dst}")

    try:
        if src.samefile(dst):
            raise ValueError(f"Source and destination are the same file: {src}")
    except FileNotFoundError:
        # dst doesn't exist yet, which is fine
        pass

    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    return dst.resolve()
