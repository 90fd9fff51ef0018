#
# ScratchFS - Validators Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from pathlib import Path

# Third Party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from scratchfs.validators import validate_name, validate_path


# Tests ----------------------------------------------------------------------------------------------------------------

class TestValidateName:
    def test_returns_name(self):
        """Return a valid name unchanged."""
        assert validate_name("data.txt", "unused") == "data.txt"

    @pytest.mark.parametrize(
        "name",
        [
            pytest.param(None, id="none"),
            pytest.param("", id="empty"),
        ],
    )
    def test_rejects_missing_name(self, name):
        """Raise ValueError with the given message."""
        with pytest.raises(ValueError, match=r"^Name is required$"):
            validate_name(name, "Name is required")


class TestValidatePath:
    def test_converts_text(self):
        """Convert text paths to Path."""
        assert validate_path("a/b", "unused") == Path("a/b")

    def test_accepts_pathlike(self, tmp_path: Path):
        """Accept PathLike objects."""
        assert validate_path(tmp_path, "unused") == tmp_path

    @pytest.mark.parametrize(
        "path",
        [
            pytest.param(None, id="none"),
            pytest.param("", id="empty"),
        ],
    )
    def test_rejects_missing_path(self, path):
        """Raise ValueError before any filesystem access."""
        with pytest.raises(ValueError, match=r"^Path is required$"):
            validate_path(path, "Path is required")

    def test_rejects_empty_pathlike(self):
        """Reject a PathLike whose file system representation is empty."""

        class EmptyPath:
            def __fspath__(self):
                return ""

        with pytest.raises(ValueError, match=r"^Path is required$"):
            validate_path(EmptyPath(), "Path is required")
