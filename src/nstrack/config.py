"""Tracker configuration helpers."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

from .constants import CONFIG_FILE, NSTRACK_DIR
from .platforms import DEFAULT_PLATFORM, Platform

logger = logging.getLogger(__name__)


@dataclass
class TrackerConfig:
    """Configuration for scans started from a project directory."""

    source_dirs: List[str] = field(default_factory=lambda: ["src"])
    platform: str = DEFAULT_PLATFORM.value
    ignore: List[str] = field(default_factory=list)

    def platform_enum(self) -> Platform:
        """Configured platform.

        Raises:
            InvalidPlatformError: If the configured name is unknown
        """
        return Platform.parse(self.platform)

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            {
                "source_dirs": list(self.source_dirs),
                "platform": self.platform,
                "ignore": list(self.ignore),
            },
            sort_keys=False,
        )


def load_tracker_config(root: Path) -> TrackerConfig:
    """Load configuration from .nstrack/config.yaml under root if present."""

    cfg_path = root / NSTRACK_DIR / CONFIG_FILE
    if not cfg_path.exists():
        return TrackerConfig()

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return TrackerConfig()

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping", cfg_path)
        return TrackerConfig()

    return TrackerConfig(
        source_dirs=list(data.get("source_dirs", ["src"])),
        platform=str(data.get("platform", DEFAULT_PLATFORM.value)),
        ignore=list(data.get("ignore", [])),
    )
