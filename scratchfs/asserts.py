"""
Assertions for files and directories in the filesystem.

Each function accepts a text path or any PathLike. Text paths are validated first: None or an empty
string raises ValueError before the filesystem is touched. A mismatch between the expected and the
actual filesystem state raises AssertionError with a message naming the path.

Every call queries the filesystem again; nothing is cached between calls.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import os
from pathlib import Path

# Local ----------------------------------------------------------------------------------------------------------------
from .validators import validate_name, validate_path

log = logging.getLogger(__name__)

# Constants ------------------------------------------------------------------------------------------------------------

FILE_NAME_REQUIRED = "File name argument cannot be null or empty"
DIRECTORY_NAME_REQUIRED = "Directory name argument cannot be null or empty"
CHILD_NAME_REQUIRED = "Child name argument cannot be null or empty"


# File Assertions ------------------------------------------------------------------------------------------------------

def assert_file_exists(path: str | os.PathLike[str]) -> None:
    """Assert that path exists and refers to a regular file."""
    file = validate_path(path, FILE_NAME_REQUIRED)
    if not file.exists():
        raise AssertionError(f"File {file} does not exist")
    if not file.is_file():
        raise AssertionError(f"{file} does not refer to a file")


def assert_file_not_exists(path: str | os.PathLike[str]) -> None:
    """Assert that nothing exists at path."""
    file = validate_path(path, FILE_NAME_REQUIRED)
    if file.exists():
        raise AssertionError(f"{file} exists")


# Directory Assertions -------------------------------------------------------------------------------------------------

def assert_directory_exists(path: str | os.PathLike[str]) -> None:
    """Assert that path exists and refers to a directory."""
    directory = validate_path(path, DIRECTORY_NAME_REQUIRED)
    if not directory.exists():
        raise AssertionError(f"Directory {directory} does not exist")
    if not directory.is_dir():
        raise AssertionError(f"{directory} does not refer to a directory")


def assert_directory_not_exists(path: str | os.PathLike[str]) -> None:
    """Assert that nothing exists at path."""
    directory = validate_path(path, DIRECTORY_NAME_REQUIRED)
    if directory.exists():
        raise AssertionError(f"{directory} exists")


def assert_directory_is_empty(path: str | os.PathLike[str]) -> None:
    """
    Assert that path is an existing directory without any entries.

    The failure message lists the entries found, sorted by name:

        Directory build/test-files is not empty - contains [a.txt, child]
    """
    directory = _existing_directory(path)
    entries = sorted(os.listdir(directory))
    if entries:
        raise AssertionError(f"Directory {directory} is not empty - contains [{', '.join(entries)}]")


def assert_directory_not_empty(path: str | os.PathLike[str]) -> None:
    """Assert that path is an existing directory with at least one entry."""
    directory = _existing_directory(path)
    if not os.listdir(directory):
        raise AssertionError(f"Directory {directory} is empty")


def assert_directory_child_count_equals(path: str | os.PathLike[str], expected: int) -> None:
    """Assert the number of direct entries of a directory, whatever their kind."""
    directory = _existing_directory(path)
    actual = len(os.listdir(directory))
    if actual != expected:
        raise AssertionError(
            f"Unexpected number of children in directory {directory}: expected {expected}, found {actual}")


def assert_directory_child_file_count_equals(path: str | os.PathLike[str], expected: int) -> None:
    """Assert the number of regular files directly inside a directory."""
    directory = _existing_directory(path)
    actual = sum(1 for child in directory.iterdir() if child.is_file())
    if actual != expected:
        raise AssertionError(
            f"Unexpected number of files in directory {directory}: expected {expected}, found {actual}")


def assert_directory_child_directory_count_equals(path: str | os.PathLike[str], expected: int) -> None:
    """
    Assert the number of directories directly inside a directory.

    The failure message reads "Unexpected number of files"; existing suites match on that text.
    """
    directory = _existing_directory(path)
    actual = sum(1 for child in directory.iterdir() if child.is_dir())
    if actual != expected:
        raise AssertionError(
            f"Unexpected number of files in directory {directory}: expected {expected}, found {actual}")


def assert_directory_contains_file(path: str | os.PathLike[str], file_name: str) -> None:
    """Assert that a directory holds a regular file with the given name."""
    directory = _existing_directory(path)
    validate_name(file_name, CHILD_NAME_REQUIRED)
    expected = directory / file_name
    if not expected.exists():
        raise AssertionError(f"File {file_name} does not exist in directory {directory}")
    if not expected.is_file():
        raise AssertionError(f"{file_name} in directory {directory} does not refer to a file")


def assert_directory_not_contains_file(
        path: str | os.PathLike[str],
        file_name: str,
        *,
        logger: logging.Logger | None = None,
) -> None:
    """
    Assert that a directory does not hold a regular file with the given name.

    An entry of the same name that is not a file does not fail the assertion; a warning is
    logged instead.

    Args:
        path: The directory to inspect.
        file_name: Name of the entry, relative to the directory.
        logger: Logger for the kind-mismatch warning. Defaults to this module's logger.

    Raises:
        ValueError: If path or file_name is None or empty.
        AssertionError: If the directory is missing, or the file exists.
    """
    directory = _existing_directory(path)
    validate_name(file_name, CHILD_NAME_REQUIRED)
    unexpected = directory / file_name
    if unexpected.exists():
        if unexpected.is_file():
            raise AssertionError(f"File {file_name} exists in directory {directory}")
        (logger or log).warning("The directory %s contains %s, but it is not a file", directory, file_name)


def assert_directory_contains_directory(path: str | os.PathLike[str], directory_name: str) -> None:
    """Assert that a directory holds a child directory with the given name."""
    directory = _existing_directory(path)
    validate_name(directory_name, CHILD_NAME_REQUIRED)
    expected = directory / directory_name
    if not expected.exists():
        raise AssertionError(f"Directory {directory_name} does not exist in directory {directory}")
    if not expected.is_dir():
        raise AssertionError(f"{directory_name} in directory {directory} does not refer to a directory")


def assert_directory_not_contains_directory(
        path: str | os.PathLike[str],
        directory_name: str,
        *,
        logger: logging.Logger | None = None,
) -> None:
    """
    Assert that a directory does not hold a child directory with the given name.

    An entry of the same name that is not a directory only logs a warning.
    """
    directory = _existing_directory(path)
    validate_name(directory_name, CHILD_NAME_REQUIRED)
    unexpected = directory / directory_name
    if unexpected.exists():
        if unexpected.is_dir():
            raise AssertionError(f"Directory {directory_name} exists in directory {directory}")
        (logger or log).warning("The directory %s contains %s, but it is not a directory", directory, directory_name)


# Private Methods ------------------------------------------------------------------------------------------------------

def _existing_directory(path: str | os.PathLike[str]) -> Path:
    directory = validate_path(path, DIRECTORY_NAME_REQUIRED)
    assert_directory_exists(directory)
    return directory
