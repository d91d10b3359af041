"""Tests for configuration loading and platforms."""

import pytest

from nstrack.config import TrackerConfig, load_tracker_config
from nstrack.errors import ConfigError, InvalidPlatformError
from nstrack.platforms import Platform


class TestPlatform:
    """Test the platform table."""

    def test_cljc_is_shared(self):
        """Test that .cljc files belong to both platforms."""
        for platform in Platform:
            assert ".cljc" in platform.extensions

    def test_extensions(self):
        """Test the extensions selected by each platform."""
        assert Platform.CLJ.extensions == {".clj", ".cljc"}
        assert Platform.CLJS.extensions == {".cljs", ".cljc"}
        assert Platform.ANY.extensions == {".clj", ".cljs", ".cljc"}

    def test_features(self):
        """Test the reader features of each platform."""
        assert Platform.CLJ.features == {"clj"}
        assert Platform.CLJS.features == {"cljs"}

    def test_parse(self):
        assert Platform.parse("CLJS ") is Platform.CLJS

    def test_parse_unknown(self):
        """Test that unknown platform names are rejected."""
        with pytest.raises(InvalidPlatformError) as exc_info:
            Platform.parse("jython")
        assert isinstance(exc_info.value, ConfigError)
        assert "clj, cljs, any" in str(exc_info.value)


class TestLoadTrackerConfig:
    """Test reading .nstrack/config.yaml."""

    def test_defaults_without_file(self, tmp_path):
        """Test defaults when no config file exists."""
        config = load_tracker_config(tmp_path)
        assert config == TrackerConfig()
        assert config.source_dirs == ["src"]
        assert config.platform_enum() is Platform.CLJ

    def test_reads_file(self, tmp_path):
        """Test loading values from config.yaml."""
        (tmp_path / ".nstrack").mkdir()
        (tmp_path / ".nstrack" / "config.yaml").write_text(
            "source_dirs: [src, test]\nplatform: cljs\nignore: ['out/']\n"
        )
        config = load_tracker_config(tmp_path)
        assert config.source_dirs == ["src", "test"]
        assert config.platform_enum() is Platform.CLJS
        assert config.ignore == ["out/"]

    def test_invalid_yaml_falls_back(self, tmp_path):
        """Test that invalid YAML falls back to defaults."""
        (tmp_path / ".nstrack").mkdir()
        (tmp_path / ".nstrack" / "config.yaml").write_text("source_dirs: [unclosed\n")
        assert load_tracker_config(tmp_path) == TrackerConfig()

    def test_non_mapping_falls_back(self, tmp_path):
        """Test that a non-mapping document falls back to defaults."""
        (tmp_path / ".nstrack").mkdir()
        (tmp_path / ".nstrack" / "config.yaml").write_text("- just\n- a list\n")
        assert load_tracker_config(tmp_path) == TrackerConfig()

    def test_invalid_platform(self, tmp_path):
        """Test that an unknown platform in config is reported on use."""
        (tmp_path / ".nstrack").mkdir()
        (tmp_path / ".nstrack" / "config.yaml").write_text("platform: scala\n")
        config = load_tracker_config(tmp_path)
        with pytest.raises(InvalidPlatformError):
            config.platform_enum()

    def test_yaml_roundtrip(self, tmp_path):
        config = TrackerConfig(source_dirs=["src", "dev"], platform="any", ignore=["out/"])
        (tmp_path / ".nstrack").mkdir()
        (tmp_path / ".nstrack" / "config.yaml").write_text(config.to_yaml())
        assert load_tracker_config(tmp_path) == config
