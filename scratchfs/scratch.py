#
# ScratchFS Scratch Directory
#

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import os
import re
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from . import asserts
from .errors import ScratchOperationError, ScratchStateError
from .fsops import clean_dir, copy_file
from .validators import validate_name

log = logging.getLogger(__name__)

# Constants ------------------------------------------------------------------------------------------------------------

DEFAULT_DIRECTORY = "build/test-files"
DEFAULT_ENCODING = "utf-8"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


# Classes --------------------------------------------------------------------------------------------------------------

class ScratchDir:
    """
    A directory owned by a single test for the duration of that test.

    Lifecycle:
        - Construction binds the instance to a path. An existing path that is not a directory is rejected.
        - ``open()`` creates the directory (and any missing parents), or clears the contents of an existing one.
        - ``close()`` clears the contents again when ``delete_after`` is set. The directory itself is kept.

    The instance is also a context manager: ``__enter__`` opens it and ``__exit__`` closes it whatever the
    outcome of the block. Any test framework can drive the same pair of calls from its own setup and teardown
    hooks; see ``scratchfs.pytest_plugin`` for the pytest fixture.

    Failures fall in three kinds:
        - ValueError: a caller-supplied name or path is None or empty. Raised before any filesystem access.
        - ScratchStateError: the target is missing or of the wrong kind.
        - ScratchOperationError: the filesystem call itself failed. The OSError is chained as ``__cause__``.

    The ``assert_*`` methods raise AssertionError, with the messages of ``scratchfs.asserts``.

    Instances are not thread-safe; parallel tests must each use their own instance bound to a distinct path.

    Args:
        path: Directory to manage. Defaults to ``build/test-files`` relative to the working directory.
        delete_after: Clear the directory contents on ``close()``.
        logger: Logger for advisory messages. Defaults to this module's logger.

    Examples:
        >>> with ScratchDir("build/test-files/example") as scratch:
        ...     scratch.new_file_with_body("greeting.txt", "hello")
        ...     scratch.assert_contains_file("greeting.txt")
        ...     scratch.read_file("greeting.txt")
        'hello'
    """

    def __init__(
            self,
            path: str | os.PathLike[str] = DEFAULT_DIRECTORY,
            *,
            delete_after: bool = False,
            logger: logging.Logger | None = None,
    ) -> None:
        if path is None or os.fspath(path) == "":
            raise ValueError("The directory name argument for the test directory cannot be null or empty")
        directory = Path(path)
        # Path("") normalises to "."
        if directory == Path(".") or directory.resolve() == Path.cwd().resolve():
            raise ValueError(f"The specified directory name '{path}' cannot refer to the working directory")
        if directory.exists() and not directory.is_dir():
            raise ValueError(f"The specified directory name '{path}' does not refer to a directory")
        self._path = directory
        self._delete_after = bool(delete_after)
        self.log = logger or log

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._path)!r}, delete_after={self._delete_after})"

    def __str__(self) -> str:
        return str(self._path)

    def __fspath__(self) -> str:
        return str(self._path)

    def __enter__(self) -> "ScratchDir":
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def path(self) -> Path:
        """The managed directory."""
        return self._path

    def to_path(self) -> Path:
        return self._path

    @property
    def delete_after(self) -> bool:
        """Whether ``close()`` clears the directory contents."""
        return self._delete_after

    @delete_after.setter
    def delete_after(self, value: bool) -> None:
        self._delete_after = bool(value)

    def set_delete_after(self, delete_after: bool = True) -> "ScratchDir":
        """Set ``delete_after`` and return self, for chaining after the constructor."""
        self.delete_after = delete_after
        return self

    # Lifecycle --------------------------------------------------------------------------------------------------------

    def open(self) -> "ScratchDir":
        """
        Prepare an empty directory.

        Creates the directory with its missing parents, or clears the contents of an existing directory.

        Raises:
            ScratchStateError: If the path now refers to something other than a directory.
            ScratchOperationError: If the directory cannot be created or cleared.
        """
        if self._path.exists():
            if not self._path.is_dir():
                raise ScratchStateError(f"The '{self._path}' test directory does not refer to a directory")
            self.cleanup()
        else:
            try:
                self._path.mkdir(parents=True)
            except OSError as ex:
                raise ScratchOperationError(f"Failed to create {self._path} directory - Path.mkdir() failed") from ex
            self.log.debug("Created test directory %s", self._path)
        return self

    initialize = open

    def close(self) -> None:
        """Clear the directory contents if ``delete_after`` is set."""
        if self._delete_after:
            self.cleanup()

    def cleanup(self) -> None:
        """
        Remove every entry of the directory, keeping the directory itself.

        Does nothing when the directory does not exist.
        """
        if not self._path.is_dir():
            return
        try:
            removed = clean_dir(self._path)
        except OSError as ex:
            raise ScratchOperationError(f"Failed to clean existing {self._path} directory") from ex
        if removed:
            self.log.info("Cleared test directory %s contents %s", self._path, removed)

    # Mutation ---------------------------------------------------------------------------------------------------------

    def new_file(self, file_name: str) -> Path:
        """
        Create an empty file directly under the directory.

        Raises:
            ValueError: If file_name is None or empty.
            ScratchOperationError: If the file already exists or cannot be created.
        """
        file = self._child(
            file_name,
            f"Failed to create a new file in the '{self._path}' directory - "
            f"the filename argument cannot be null or empty")
        try:
            file.touch(exist_ok=False)
        except FileExistsError as ex:
            raise ScratchOperationError(
                f"Failed to create the '{file_name}' file in the '{self._path}' directory - "
                f"the file already exists") from ex
        except OSError as ex:
            raise ScratchOperationError(
                f"Failed to create the '{file_name}' file in the '{self._path}' directory") from ex
        self.log.debug("Created file %s", file)
        return file

    def new_file_with_body(self, file_name: str, body: str, *, encoding: str = DEFAULT_ENCODING) -> Path:
        """
        Create a file and write body to it verbatim.

        No newline is appended and line endings are not translated. The file is flushed before returning.
        """
        file = self.new_file(file_name)
        try:
            with open(file, "w", encoding=encoding, newline="") as f:
                f.write(body)
                f.flush()
        except OSError as ex:
            raise ScratchOperationError(
                f"Failed to write body to new '{file}' file in '{self._path}' directory") from ex
        return file

    def copy_file(self, source: str | os.PathLike[str], new_name: str | None = None) -> Path:
        """
        Copy an existing file into the directory.

        Args:
            source: The file to copy.
            new_name: Name of the copy. Defaults to the source file name.

        Returns:
            Path: The copy, inside the directory.

        Raises:
            ValueError: If source is None or empty, missing, or not a file, or if new_name is empty.
            ScratchOperationError: If the copy fails.
        """
        if new_name is None:
            return self._copy_file(source)
        return self._copy_file_as(source, new_name)

    def new_directory(self, directory_name: str) -> Path:
        """
        Create a child directory, including any intermediate directories.

        Raises:
            ValueError: If directory_name is None or empty.
            ScratchOperationError: If the directory already exists or cannot be created.
        """
        child = self._child(
            directory_name,
            f"Failed to create a new child directory in the '{self._path}' directory - "
            f"the child directory name argument cannot be null or empty")
        try:
            child.mkdir(parents=True)
        except FileExistsError as ex:
            raise ScratchOperationError(
                f"Failed to create a new '{directory_name}' child directory in the '{self._path}' directory - "
                f"the child directory already exists") from ex
        except OSError as ex:
            raise ScratchOperationError(
                f"Failed to create a new '{directory_name}' child directory in the '{self._path}' directory - "
                f"Path.mkdir() failed") from ex
        self.log.debug("Created directory %s", child)
        return child

    def delete_file(self, file_name: str) -> None:
        file = self._child(
            file_name,
            f"Failed to delete a file from the '{self._path}' directory - "
            f"the filename argument cannot be null or empty")
        if not file.exists():
            raise ScratchStateError(
                f"Failed to delete the '{file_name}' file from the '{self._path}' directory - "
                f"the file does not exist")
        if not file.is_file():
            raise ScratchStateError(
                f"Failed to delete the '{file_name}' file from the '{self._path}' directory - "
                f"the filename does not refer to a file")
        try:
            file.unlink()
        except OSError as ex:
            raise ScratchOperationError(
                f"Failed to delete the '{file_name}' file from the '{self._path}' directory - "
                f"Path.unlink() failed") from ex
        self.log.debug("Deleted file %s", file)

    def delete_directory(self, directory_name: str) -> None:
        """Delete a child directory and everything below it."""
        child = self._child_directory(
            directory_name,
            f"Failed to delete a child directory from the '{self._path}' directory - "
            f"the child directory name argument cannot be null or empty",
            f"Failed to delete the '{directory_name}' child directory from the '{self._path}' directory")
        try:
            shutil.rmtree(child)
        except OSError as ex:
            raise ScratchOperationError(
                f"Failed to delete the '{directory_name}' child directory from the '{self._path}' directory") from ex
        self.log.debug("Deleted directory %s", child)

    # Inspection -------------------------------------------------------------------------------------------------------

    def get_directory(self, directory_name: str) -> Path:
        """Return an existing child directory. Nothing is created."""
        return self._child_directory(
            directory_name,
            f"Failed to get a Path object for a child directory from the '{self._path}' directory - "
            f"the child directory name argument cannot be null or empty",
            f"Failed to get a Path object for the {directory_name} child directory from the '{self._path}' directory")

    def get_file(self, file_name: str) -> Path:
        """Return an existing file directly under the directory. Nothing is created."""
        file = self._child(
            file_name,
            f"Failed to get a Path object from the '{self._path}' directory - "
            f"the filename argument cannot be null or empty")
        prefix = f"Failed to get a Path object for the '{file_name}' file from the '{self._path}' directory"
        if not file.exists():
            raise ScratchStateError(f"{prefix} - the file does not exist")
        if not file.is_file():
            raise ScratchStateError(f"{prefix} - the filename does not refer to a file")
        return file

    def get_file_from_child_directory(self, directory_name: str, file_name: str) -> Path:
        """Return an existing file from an existing child directory. Nothing is created."""
        child = self._child(
            directory_name,
            f"Failed to get a Path object from the child directory in the '{self._path}' directory - "
            f"the child directory name argument cannot be null or empty")
        file = child / self._relative_name(
            file_name,
            f"Failed to get a Path object from the '{directory_name}' child directory in the '{self._path}' "
            f"directory - the filename argument cannot be null or empty")
        prefix = (f"Failed to get a Path object for the '{file_name}' file from the '{directory_name}' "
                  f"child directory in the '{self._path}' directory")
        if not child.exists():
            raise ScratchStateError(f"{prefix} - the child directory does not exist")
        if not child.is_dir():
            raise ScratchStateError(f"{prefix} - the child directory name does not refer to a directory")
        if not file.exists():
            raise ScratchStateError(f"{prefix} - the file does not exist")
        if not file.is_file():
            raise ScratchStateError(f"{prefix} - the filename does not refer to a file")
        return file

    def read_file(self, file_name: str, *, encoding: str = DEFAULT_ENCODING) -> str:
        """Return the whole content of a file as one string, line endings untouched."""
        file = self._readable_file(file_name, "a file", "the")
        try:
            with open(file, encoding=encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as ex:
            raise ScratchOperationError(
                f"Failed to read the '{file_name}' file in the '{self._path}' directory") from ex

    def read_file_lines(self, file_name: str, *, encoding: str = DEFAULT_ENCODING) -> list[str]:
        """
        Return the lines of a file, without line terminators.

        Only ``\\r\\n``, ``\\r`` and ``\\n`` end a line; form feeds and Unicode separators stay in the text.
        A trailing line terminator does not produce an extra empty line.
        """
        file = self._readable_file(file_name, "the lines of a file", "the lines of the")
        try:
            with open(file, encoding=encoding, newline="") as f:
                lines = _LINE_BREAK.split(f.read())
        except (OSError, UnicodeDecodeError) as ex:
            raise ScratchOperationError(
                f"Failed to read the lines of the '{file_name}' file in the '{self._path}' directory") from ex
        if lines[-1] == "":
            lines.pop()
        return lines

    # Assertions -------------------------------------------------------------------------------------------------------

    def assert_is_empty(self) -> None:
        asserts.assert_directory_is_empty(self._path)

    def assert_not_empty(self) -> None:
        asserts.assert_directory_not_empty(self._path)

    def assert_child_count_equals(self, expected: int) -> None:
        asserts.assert_directory_child_count_equals(self._path, expected)

    def assert_file_count_equals(self, expected: int) -> None:
        asserts.assert_directory_child_file_count_equals(self._path, expected)

    def assert_child_directory_count_equals(self, expected: int) -> None:
        asserts.assert_directory_child_directory_count_equals(self._path, expected)

    def assert_contains_file(self, file_name: str) -> None:
        asserts.assert_directory_contains_file(self._path, file_name)

    def assert_not_contains_file(self, file_name: str) -> None:
        asserts.assert_directory_not_contains_file(self._path, file_name, logger=self.log)

    def assert_contains_directory(self, directory_name: str) -> None:
        asserts.assert_directory_contains_directory(self._path, directory_name)

    def assert_not_contains_directory(self, directory_name: str) -> None:
        asserts.assert_directory_not_contains_directory(self._path, directory_name, logger=self.log)

    def assert_child_directory_is_empty(self, directory_name: str) -> None:
        asserts.assert_directory_is_empty(self._asserted_child(directory_name))

    def assert_child_directory_not_empty(self, directory_name: str) -> None:
        asserts.assert_directory_not_empty(self._asserted_child(directory_name))

    def assert_child_count_in_child_directory_equals(self, directory_name: str, expected: int) -> None:
        asserts.assert_directory_child_count_equals(self._asserted_child(directory_name), expected)

    def assert_file_count_in_child_directory_equals(self, directory_name: str, expected: int) -> None:
        asserts.assert_directory_child_file_count_equals(self._asserted_child(directory_name), expected)

    def assert_child_directory_count_in_child_directory_equals(self, directory_name: str, expected: int) -> None:
        asserts.assert_directory_child_directory_count_equals(self._asserted_child(directory_name), expected)

    def assert_contains_file_in_child_directory(self, directory_name: str, file_name: str) -> None:
        asserts.assert_directory_contains_file(self._asserted_child(directory_name), file_name)

    def assert_not_contains_file_in_child_directory(self, directory_name: str, file_name: str) -> None:
        asserts.assert_directory_not_contains_file(self._asserted_child(directory_name), file_name,
                                                   logger=self.log)

    def assert_contains_directory_in_child_directory(self, directory_name: str, child_name: str) -> None:
        asserts.assert_directory_contains_directory(self._asserted_child(directory_name), child_name)

    def assert_not_contains_directory_in_child_directory(self, directory_name: str, child_name: str) -> None:
        asserts.assert_directory_not_contains_directory(self._asserted_child(directory_name), child_name,
                                                        logger=self.log)

    # Private Methods --------------------------------------------------------------------------------------------------

    def _relative_name(self, name: str, message: str) -> str:
        validate_name(name, message)
        relative = Path(name)
        if relative.anchor or relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"The '{name}' name must be relative to and stay inside the '{self._path}' directory")
        return name

    def _child(self, name: str, message: str) -> Path:
        """Join a validated, relative name onto the directory; names that would leave it raise ValueError."""
        return self._path / self._relative_name(name, message)

    def _asserted_child(self, directory_name: str) -> Path:
        child = self._child(directory_name, asserts.CHILD_NAME_REQUIRED)
        self.assert_contains_directory(directory_name)
        return child

    def _child_directory(self, directory_name: str, name_message: str, prefix: str) -> Path:
        child = self._child(directory_name, name_message)
        if not child.exists():
            raise ScratchStateError(f"{prefix} - the child directory does not exist")
        if not child.is_dir():
            raise ScratchStateError(f"{prefix} - the child directory name does not refer to a directory")
        return child

    def _readable_file(self, file_name: str, what: str, what_named: str) -> Path:
        file = self._child(
            file_name,
            f"Failed to read {what} in the '{self._path}' directory - the filename argument cannot be null or empty")
        prefix = f"Failed to read {what_named} '{file_name}' file in the '{self._path}' directory"
        if not file.exists():
            raise ScratchStateError(f"{prefix} - the file does not exist")
        if not file.is_file():
            raise ScratchStateError(f"{prefix} - the filename does not refer to a file")
        return file

    def _checked_source(self, source: str | os.PathLike[str] | None, null_message: str, prefix: str) -> Path:
        if source is None or (isinstance(source, str) and not source):
            raise ValueError(null_message)
        source_file = Path(source)
        if not source_file.exists():
            raise ValueError(f"{prefix} - the source file does not exist")
        if not source_file.is_file():
            raise ValueError(f"{prefix} - the source file does not refer to a file")
        return source_file

    def _copy_file(self, source: str | os.PathLike[str] | None) -> Path:
        prefix = f"Failed to copy the '{source}' source file to the '{self._path}' directory"
        source_file = self._checked_source(
            source,
            f"Failed to copy a source file to the '{self._path}' directory - "
            f"the source file argument cannot be null or empty",
            prefix)
        return self._copy_to(source_file, self._path / source_file.name, prefix, prefix)

    def _copy_file_as(self, source: str | os.PathLike[str] | None, new_name: str) -> Path:
        prefix = f"Failed to copy the '{source}' source file to the '{self._path}' directory as the '{new_name}' file"
        source_file = self._checked_source(
            source,
            f"Failed to copy a source file to the '{self._path}' directory as the '{new_name}' file - "
            f"the source file argument cannot be null or empty",
            prefix)
        target = self._child(
            new_name,
            f"Failed to copy the '{source}' source file to the '{self._path}' directory with a new filename - "
            f"the new filename argument cannot be null or empty")
        return self._copy_to(
            source_file, target, prefix,
            f"Failed to copy the '{source}' source file to the '{self._path}' directory under the new name {new_name}")

    def _copy_to(self, source_file: Path, target: Path, prefix: str, failure: str) -> Path:
        if target.exists() and not target.is_file():
            raise ScratchStateError(f"{prefix} - the destination exists but is not a file")
        try:
            copied = copy_file(source_file, target)
        except (OSError, ValueError) as ex:
            raise ScratchOperationError(failure) from ex
        self.log.debug("Copied %s to %s", source_file, copied)
        return target


# Methods --------------------------------------------------------------------------------------------------------------

@contextmanager
def scratch_dir(path: str | os.PathLike[str] = DEFAULT_DIRECTORY, *,
                delete_after: bool = False,
                logger: logging.Logger | None = None) -> Iterator[ScratchDir]:
    """
    Context manager that provides an opened ScratchDir.

    The directory is created or cleared on entry. On exit its contents are removed only when
    ``delete_after`` is set; the directory itself always remains.
    """
    scratch = ScratchDir(path, delete_after=delete_after, logger=logger)
    scratch.open()
    try:
        yield scratch
    finally:
        scratch.close()
