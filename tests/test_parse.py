"""Tests for ns declaration parsing."""

import pytest

from nstrack.parse import (
    deps_from_ns_decl,
    is_ns_decl,
    name_from_ns_decl,
    read_file_ns_decl,
    read_ns_decl,
)
from nstrack.platforms import Platform


class TestReadNsDecl:
    """Test locating the ns form."""

    def test_first_ns_form(self):
        """Test that the first ns form is returned."""
        decl = read_ns_decl("(ns example.core)\n(defn f [] 1)")
        assert is_ns_decl(decl)
        assert name_from_ns_decl(decl) == "example.core"

    def test_skips_leading_forms(self):
        """Test that forms before the ns form are skipped."""
        decl = read_ns_decl(";; header\n(comment stuff)\n(ns example.late)")
        assert name_from_ns_decl(decl) == "example.late"

    def test_no_ns_form(self):
        """Test text without an ns form."""
        assert read_ns_decl("(defn f [] 1)") is None
        assert read_ns_decl("") is None

    def test_stops_after_ns_form(self):
        """Test that reading stops at the ns form."""
        # Malformed code after the declaration is never read
        decl = read_ns_decl("(ns example.core)\n(defn broken [")
        assert name_from_ns_decl(decl) == "example.core"

    def test_ns_in_string_is_not_a_declaration(self):
        """Test that an ns form inside a string is not a declaration."""
        assert read_ns_decl('("ns" example.core)') is None


class TestReadFileNsDecl:
    """Test reading declarations from files."""

    def test_reads_file(self, tmp_path):
        """Test reading a declaration from a file."""
        f = tmp_path / "core.clj"
        f.write_text("(ns example.core (:require example.util))")
        decl = read_file_ns_decl(f)
        assert name_from_ns_decl(decl) == "example.core"

    def test_missing_file(self, tmp_path):
        """Test that a missing file has no declaration."""
        assert read_file_ns_decl(tmp_path / "missing.clj") is None

    def test_malformed_file(self, tmp_path):
        """Test that a malformed header has no declaration."""
        f = tmp_path / "bad.clj"
        f.write_text("(ns example.bad")
        assert read_file_ns_decl(f) is None

    def test_binary_file(self, tmp_path):
        """Test that undecodable bytes have no declaration."""
        f = tmp_path / "bin.clj"
        f.write_bytes(b"\xff\xfe\x00(ns")
        assert read_file_ns_decl(f) is None

    def test_platform_features(self, tmp_path):
        """Test that reader conditionals follow the platform features."""
        f = tmp_path / "shared.cljc"
        f.write_text("(ns example.shared (:require #?(:clj example.jvm :cljs example.js)))")
        assert deps_from_ns_decl(read_file_ns_decl(f, Platform.CLJ.features)) == {"example.jvm"}
        assert deps_from_ns_decl(read_file_ns_decl(f, Platform.CLJS.features)) == {"example.js"}

    def test_declaration_spanning_chunks(self, tmp_path, monkeypatch):
        """Test that a declaration split across read chunks is still found."""
        import nstrack.parse as parse

        monkeypatch.setattr(parse, "HEADER_CHUNK", 8)
        f = tmp_path / "core.clj"
        f.write_text(";; \"(ns fake)\" in a comment\n(ns example.core\n  (:require [example.util :as u]))\n")
        decl = read_file_ns_decl(f)
        assert name_from_ns_decl(decl) == "example.core"
        assert deps_from_ns_decl(decl) == {"example.util"}

    def test_reads_only_the_header(self, tmp_path):
        """Test that content far past the declaration is never decoded."""
        f = tmp_path / "generated.clj"
        f.write_bytes(b"(ns example.generated)\n" + b";" * 200_000 + b"\n\xff\xfe")
        assert name_from_ns_decl(read_file_ns_decl(f)) == "example.generated"

    def test_malformed_after_short_prefix(self, tmp_path, monkeypatch):
        """Test that a header malformed in full is rejected, not retried forever."""
        import nstrack.parse as parse

        monkeypatch.setattr(parse, "HEADER_CHUNK", 4)
        f = tmp_path / "bad.clj"
        f.write_text("(ns example.bad (:require")
        assert read_file_ns_decl(f) is None


class TestNameFromNsDecl:
    """Test extracting the namespace name."""

    def test_none(self):
        assert name_from_ns_decl(None) is None

    def test_missing_name(self):
        """Test an ns form without a name."""
        assert name_from_ns_decl(read_ns_decl("(ns)")) is None

    def test_with_metadata(self):
        """Test that name metadata is ignored."""
        assert name_from_ns_decl(read_ns_decl("(ns ^:no-doc my-app.core)")) == "my-app.core"


class TestDepsFromNsDecl:
    """Test extracting required namespaces."""

    @pytest.mark.parametrize("text,expected", [
        ("(ns a)", set()),
        ("(ns a (:require b c))", {"b", "c"}),
        ("(ns a (:require [b :as bb] [c :refer [x y]]))", {"b", "c"}),
        ("(ns a (:use d))", {"d"}),
        ("(ns a (:require (p q [r :as rr])))", {"p.q", "p.r"}),
        ("(ns a (:require [p q r]))", {"p.q", "p.r"}),
        ("(ns a (:require b :reload))", {"b"}),
        ('(ns a (:require ["react" :as react] b))', {"b"}),
        ("(ns a (:require-macros [m :refer [mac]]))", {"m"}),
        ("(ns a (:import (java.io File)))", set()),
        ("(ns a (require b))", {"b"}),
        ('(ns a "doc" {:author x} (:require b))', {"b"}),
    ])
    def test_deps(self, text, expected):
        """Test dependency extraction from require and use clauses."""
        assert deps_from_ns_decl(read_ns_decl(text)) == expected

    def test_none(self):
        assert deps_from_ns_decl(None) == set()

    def test_spliced_conditional(self):
        """Test dependencies spliced in by a reader conditional."""
        decl = read_ns_decl(
            "(ns a (:require #?@(:clj [b c] :cljs [d])))",
            Platform.CLJ.features,
        )
        assert deps_from_ns_decl(decl) == {"b", "c"}
