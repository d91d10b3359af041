"""Tests for matching file paths against ns declarations."""

from pathlib import Path

from nstrack.matcher import expected_path, path_matches_ns


class TestExpectedPath:
    """Test derivation of the path implied by a namespace name."""

    def test_dots_become_separators(self):
        """Test that namespace segments become directories."""
        assert expected_path(Path("/src"), "example.core") == Path("/src/example/core")

    def test_hyphens_become_underscores(self):
        """Test that hyphens in namespaces map to underscores."""
        assert expected_path(Path("/src"), "my-app.some-ns") == Path("/src/my_app/some_ns")

    def test_single_segment(self):
        assert expected_path(Path("/src"), "user") == Path("/src/user")


class TestPathMatchesNs:
    """Test path/declaration consistency checks."""

    def test_matching_file(self, src_dir, create_source):
        """Test that a file at its namespace's path matches."""
        f = create_source(src_dir, "example.one", "cljc")
        assert path_matches_ns(src_dir, f)

    def test_hyphenated_namespace(self, src_dir, create_source):
        """Test matching of a hyphenated namespace."""
        f = create_source(src_dir, "my-app.core")
        assert f == src_dir / "my_app" / "core.clj"
        assert path_matches_ns(src_dir, f)

    def test_copy_at_wrong_path(self, src_dir, create_source, create_copy):
        """Test that a copy at an unrelated path does not match."""
        f = create_source(src_dir, "example.one", "cljc")
        copy = create_copy(f, src_dir / "public" / "js" / "out" / "example" / "one.cljc")
        assert not path_matches_ns(src_dir, copy)

    def test_copy_matches_its_own_root(self, src_dir, create_source, create_copy):
        """Test that a copy matches relative to its own source root."""
        f = create_source(src_dir, "example.one", "cljc")
        out = src_dir / "public" / "js" / "out"
        copy = create_copy(f, out / "example" / "one.cljc")
        assert path_matches_ns(out, copy)

    def test_no_declaration(self, src_dir):
        """Test that a file without an ns form does not match."""
        f = src_dir / "script.clj"
        f.write_text("(println :hello)")
        assert not path_matches_ns(src_dir, f)

    def test_unreadable_declaration(self, src_dir):
        """Test that a malformed header does not match."""
        f = src_dir / "broken.clj"
        f.write_text("(ns broken")
        assert not path_matches_ns(src_dir, f)

    def test_missing_file(self, src_dir):
        """Test that a missing file does not match."""
        assert not path_matches_ns(src_dir, src_dir / "gone.clj")
