#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from pathlib import Path

# Local ----------------------------------------------------------------------------------------------------------------
from scratchfs.scratch import ScratchDir

pytest_plugins = ["pytester"]

TEST_FILE_NAME = "test.txt"
TEST_FILE_BODY = "Some Test Data One\nSome Test Data Two\nSome Test Data Three\nSome Test Data Four\nSome Test Data Five"


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture()
def populated_dir(tmp_path: Path) -> Path:
    """Create a directory with mixed contents (files and nested subdirectories)."""
    root = tmp_path / "root"
    root.mkdir()
    # Top-level files
    (root / "a.txt").write_text("A")
    (root / "b.log").write_text("B")
    # Nested directory with files
    sub = root / "sub"
    sub.mkdir()
    (sub / "c.dat").write_text("C")
    (sub / "d.bin").write_bytes(b"\x00\x01")
    # Deeper nesting
    deep = sub / "deep"
    deep.mkdir()
    (deep / "e.txt").write_text("E")
    return root


@pytest.fixture()
def src_file(tmp_path: Path) -> Path:
    """Create a source file outside any scratch directory, with five lines of known content."""
    data = tmp_path / "data"
    data.mkdir()
    p = data / TEST_FILE_NAME
    p.write_text(TEST_FILE_BODY, encoding="utf-8")
    return p


@pytest.fixture()
def scratch(tmp_path: Path):
    """An opened ScratchDir below tmp_path, closed after the test."""
    with ScratchDir(tmp_path / "test-files") as instance:
        yield instance
