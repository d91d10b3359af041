"""Target platforms and the source file extensions each one reads."""

from enum import Enum
from typing import FrozenSet

from .errors import InvalidPlatformError


class Platform(str, Enum):
    """Platform a scan targets.

    Each platform has its own extension set and reader features. ``.cljc``
    files are shared by every platform.
    """

    CLJ = "clj"
    CLJS = "cljs"
    ANY = "any"

    @property
    def extensions(self) -> FrozenSet[str]:
        return _EXTENSIONS[self]

    @property
    def features(self) -> FrozenSet[str]:
        """Reader conditional features active when parsing for this platform."""
        return _FEATURES[self]

    @classmethod
    def parse(cls, name: str) -> "Platform":
        """Look up a platform by name (case-insensitive)."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise InvalidPlatformError(name, [p.value for p in cls])


_EXTENSIONS = {
    Platform.CLJ: frozenset({".clj", ".cljc"}),
    Platform.CLJS: frozenset({".cljs", ".cljc"}),
    Platform.ANY: frozenset({".clj", ".cljs", ".cljc"}),
}

_FEATURES = {
    Platform.CLJ: frozenset({"clj"}),
    Platform.CLJS: frozenset({"cljs"}),
    Platform.ANY: frozenset({"clj", "cljs"}),
}

DEFAULT_PLATFORM = Platform.CLJ
