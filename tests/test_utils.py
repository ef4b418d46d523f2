"""
Tests for path helpers and validation utilities.
"""

import pytest


# ============== Tests for parse_extensions() ==============

class TestParseExtensions:
    """Tests for the parse_extensions function."""

    def test_default_list(self):
        """Test parsing the default extension list."""
        from orphaned_images.config import DEFAULT_IMAGE_EXTENSIONS
        from orphaned_images.utils import parse_extensions

        assert parse_extensions(DEFAULT_IMAGE_EXTENSIONS) == ["png", "jpg", "jpeg", "gif", "svg", "bmp"]

    def test_trims_whitespace(self):
        """Test entries are trimmed."""
        from orphaned_images.utils import parse_extensions

        assert parse_extensions("  png ,jpg,\twebp  ") == ["png", "jpg", "webp"]

    def test_drops_empty_and_duplicate_entries(self):
        """Test empty entries and repeats are dropped, order kept."""
        from orphaned_images.utils import parse_extensions

        assert parse_extensions("png,, jpg, png, ") == ["png", "jpg"]

    def test_keeps_case(self):
        """Test case is preserved (matching is case-sensitive)."""
        from orphaned_images.utils import parse_extensions

        assert parse_extensions("PNG, png") == ["PNG", "png"]

    def test_empty_string(self):
        """Test an empty setting yields no extensions."""
        from orphaned_images.utils import parse_extensions

        assert parse_extensions("") == []


# ============== Tests for path helpers ==============

class TestPathHelpers:
    """Tests for encode_image_path, file_extension, and path_variants."""

    def test_encode_image_path_spaces_only(self):
        """Test only spaces are percent-encoded."""
        from orphaned_images.utils import encode_image_path

        assert encode_image_path("My Images/photo 1 (copy).png") == "My%20Images/photo%201%20(copy).png"

    def test_file_extension(self):
        """Test extension extraction keeps case and handles edge cases."""
        from orphaned_images.utils import file_extension

        assert file_extension("photo.png") == "png"
        assert file_extension("archive.tar.gz") == "gz"
        assert file_extension("foo.PNG") == "PNG"
        assert file_extension("Makefile") == ""
        assert file_extension(".gitignore") == ""

    def test_path_variants_order(self):
        """Test the five variants come in a fixed order and are not merged."""
        from orphaned_images.utils import path_variants

        variants = path_variants("/img/my photo.png")

        assert variants == (
            "/img/my photo.png",
            "img/my photo.png",
            "/img/my%20photo.png",
            "/img/my%20photo.png",
            "my photo.png",
        )

    def test_path_variants_root_file(self):
        """Test variants of a file at the vault root."""
        from orphaned_images.utils import path_variants

        variants = path_variants("a.png")

        assert len(variants) == 5
        assert set(variants) == {"a.png"}


# ============== Tests for validate_path_within_vault() ==============

class TestValidatePath:
    """Tests for vault path validation."""

    def test_valid_relative_path(self, tmp_path):
        """Test a relative path inside the vault is accepted."""
        from orphaned_images.utils import validate_path_within_vault

        result = validate_path_within_vault("img/a.png", tmp_path)

        assert result == (tmp_path / "img" / "a.png").resolve()

    def test_file_name_with_dots_allowed(self, tmp_path):
        """Test names containing '..' inside a segment are not traversal."""
        from orphaned_images.utils import validate_path_within_vault

        result = validate_path_within_vault("img/a..b.png", tmp_path)

        assert result.name == "a..b.png"

    @pytest.mark.parametrize("bad_path", ["", "   ", "../outside.png", "img/../../x.png", "/etc/passwd", "C:/x.png"])
    def test_rejects_invalid_paths(self, tmp_path, bad_path):
        """Test empty, traversal, and absolute paths are rejected."""
        from orphaned_images.utils import PathValidationError, validate_path_within_vault

        with pytest.raises(PathValidationError):
            validate_path_within_vault(bad_path, tmp_path)

    def test_symlink_kept_when_not_following(self, tmp_path):
        """Test the link itself is returned when symlinks are not followed."""
        from orphaned_images.utils import validate_path_within_vault

        (tmp_path / "img").mkdir()
        (tmp_path / "img" / "a.png").write_bytes(b"")
        (tmp_path / "img" / "b.png").symlink_to(tmp_path / "img" / "a.png")

        assert validate_path_within_vault("img/b.png", tmp_path).name == "a.png"
        assert validate_path_within_vault("img/b.png", tmp_path, follow_symlinks=False).name == "b.png"
