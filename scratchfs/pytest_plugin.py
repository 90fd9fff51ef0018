"""
pytest integration for scratch directories.

Registered through the ``pytest11`` entry point. Provides the ``scratch_dir`` fixture, which hands each test
its own opened ScratchDir under a configurable base directory:

    def test_report(scratch_dir):
        scratch_dir.new_file_with_body("report.txt", "ok")
        scratch_dir.assert_contains_file("report.txt")

Configuration, most specific first:
    - marker: ``@pytest.mark.scratch_dir(path="build/custom", delete_after=True)``
    - command line: ``--scratch-dir=PATH``, ``--scratch-dir-delete-after``
    - ini: ``scratch_dir = build/test-files``, ``scratch_dir_delete_after = true``

Relative paths are resolved against the pytest root directory.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
from pathlib import Path
from typing import Iterator

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from .scratch import DEFAULT_DIRECTORY, ScratchDir

# Constants ------------------------------------------------------------------------------------------------------------

_UNSAFE_CHARS = re.compile(r"[^\w.-]")


# Hooks ----------------------------------------------------------------------------------------------------------------

def pytest_addoption(parser: pytest.Parser) -> None:
    """Register the scratch directory command line and ini options."""

    group = parser.getgroup("scratchfs")
    group.addoption(
        "--scratch-dir",
        action="store",
        default=None,
        dest="scratch_dir_base",
        help="Base directory for per-test scratch directories (default: ini 'scratch_dir').",
    )
    group.addoption(
        "--scratch-dir-delete-after",
        action="store_true",
        default=None,
        dest="scratch_dir_delete_after",
        help="Clear scratch directory contents after each test.",
    )
    parser.addini(
        "scratch_dir",
        help="Base directory for per-test scratch directories.",
        default=DEFAULT_DIRECTORY,
    )
    parser.addini(
        "scratch_dir_delete_after",
        type="bool",
        help="Clear scratch directory contents after each test.",
        default=False,
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "scratch_dir(path=None, delete_after=None): override the scratch directory path or cleanup for one test.",
    )


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def scratch_dir(request: pytest.FixtureRequest) -> Iterator[ScratchDir]:
    """Provide an empty ScratchDir for the test, closed when the test finishes."""
    config = request.config
    marker = request.node.get_closest_marker("scratch_dir")
    overrides = marker.kwargs if marker else {}

    path = overrides.get("path")
    if path is None:
        path = base_directory(config) / node_directory_name(request.node.nodeid)
    else:
        path = _resolve(config, path)

    delete_after = overrides.get("delete_after")
    if delete_after is None:
        delete_after = delete_after_default(config)

    with ScratchDir(path, delete_after=delete_after) as scratch:
        yield scratch


# Methods --------------------------------------------------------------------------------------------------------------

def base_directory(config: pytest.Config) -> Path:
    """Return the configured base directory for scratch directories."""
    base = config.getoption("scratch_dir_base") or config.getini("scratch_dir") or DEFAULT_DIRECTORY
    return _resolve(config, base)


def delete_after_default(config: pytest.Config) -> bool:
    option = config.getoption("scratch_dir_delete_after")
    if option is not None:
        return option
    return bool(config.getini("scratch_dir_delete_after"))


def node_directory_name(node_id: str) -> str:
    """
    Turn a test node id into a single directory name.

    The module path and class are part of the node id, so same-named tests in different modules get
    different directories.

    Examples:
        >>> node_directory_name("tests/test_io.py::test_copy[source-1]")
        'tests_test_io.py__test_copy_source-1_'
    """
    return _UNSAFE_CHARS.sub("_", node_id)


# Private Methods ------------------------------------------------------------------------------------------------------

def _resolve(config: pytest.Config, path) -> Path:
    path = Path(path)
    if not path.is_absolute():
        path = Path(config.rootpath) / path
    return path
