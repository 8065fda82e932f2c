"""Tests for validation module."""

from pathlib import Path

import pytest

from clearcache.exceptions import PathNotFoundError, UnsafePathError
from clearcache.validation import (
    validate_directory_for_deletion,
    validate_directory_for_scanning,
    validate_max_depth,
    validate_parallel_workers,
)


class TestValidateDirectoryForScanning:
    """Tests for validate_directory_for_scanning function."""

    def test_valid_directory(self, tmp_path):
        """Test that a readable directory passes."""
        validate_directory_for_scanning(tmp_path)  # Should not raise

    def test_missing_directory(self, tmp_path):
        """Test validating non-existent path."""
        with pytest.raises(PathNotFoundError, match="does not exist"):
            validate_directory_for_scanning(tmp_path / "missing")

    def test_file_instead_of_directory(self, tmp_path):
        """Test that a file is rejected."""
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(UnsafePathError, match="not a directory"):
            validate_directory_for_scanning(target)


class TestValidateDirectoryForDeletion:
    """Tests for validate_directory_for_deletion function."""

    def test_protected_paths(self):
        """Test that system paths are rejected."""
        for protected_path in ["/", "/usr", "/etc", "/tmp", "/System"]:
            with pytest.raises(UnsafePathError):
                validate_directory_for_deletion(Path(protected_path))

    def test_home_directory(self):
        """Test that the home directory is rejected."""
        with pytest.raises(UnsafePathError):
            validate_directory_for_deletion(Path.home())

    def test_too_close_to_root(self):
        """Test that shallow paths are rejected."""
        with pytest.raises(UnsafePathError, match="too close"):
            validate_directory_for_deletion(Path("/opt"))

    def test_cache_directory_with_readme(self, tmp_path):
        """Test that cache directories pass whatever files they hold."""
        target = tmp_path / ".pytest_cache"
        target.mkdir()
        (target / "README.md").write_text("# pytest cache directory #")
        (target / "CACHEDIR.TAG").write_text("Signature: 8a477f597d28d172789f06886806bc55")

        validate_directory_for_deletion(target)  # Should not raise

    def test_build_output_with_sources(self, tmp_path):
        """Test that bundler output holding index.js passes."""
        target = tmp_path / "dist"
        target.mkdir()
        (target / "index.js").write_text("export {}")

        validate_directory_for_deletion(target)  # Should not raise


class TestValidateParallelWorkers:
    """Tests for validate_parallel_workers function."""

    def test_valid_counts(self):
        """Test valid worker counts."""
        for workers in [1, 4, 64, 256]:
            validate_parallel_workers(workers)  # Should not raise

    def test_invalid_counts(self):
        """Test invalid worker counts."""
        with pytest.raises(ValueError, match="must be an integer"):
            validate_parallel_workers("4")

        with pytest.raises(ValueError, match="must be positive"):
            validate_parallel_workers(0)

        with pytest.raises(ValueError, match="at most 256"):
            validate_parallel_workers(1000)


class TestValidateMaxDepth:
    """Tests for validate_max_depth function."""

    def test_valid_depths(self):
        """Test valid depths."""
        for depth in [1, 20, 1000]:
            validate_max_depth(depth)  # Should not raise

    def test_invalid_depths(self):
        """Test invalid depths."""
        with pytest.raises(ValueError, match="must be an integer"):
            validate_max_depth("20")

        with pytest.raises(ValueError, match="must be positive"):
            validate_max_depth(0)

        with pytest.raises(ValueError, match="at most 1000"):
            validate_max_depth(1001)
