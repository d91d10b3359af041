"""Namespace declaration parsing.

Finds the ``(ns ...)`` form at the head of a source file and extracts the
declared namespace name and the namespaces it requires.
"""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Set, TextIO, Union

from .errors import DeclarationError
from .platforms import DEFAULT_PLATFORM
from .reader import Keyword, Reader, SList, Symbol, Vector

logger = logging.getLogger(__name__)

# Clause heads inside an ns form that name dependencies
DEPENDENCY_CLAUSES = frozenset({"require", "use", "require-macros", "use-macros"})

# Characters read before the first attempt to find the ns form; doubled on retry
HEADER_CHUNK = 8192


def is_ns_decl(form: object) -> bool:
    """True if form is a list whose first element is the symbol ``ns``."""
    return (
        isinstance(form, SList)
        and len(form) > 0
        and isinstance(form[0], Symbol)
        and form[0] == "ns"
    )


def read_ns_decl(text: str, features: Optional[FrozenSet[str]] = None,
                 path: Optional[Union[str, Path]] = None) -> Optional[SList]:
    """Return the first top-level ns form in text, or None.

    Raises:
        DeclarationError: If the text is malformed before an ns form is found
    """
    if features is None:
        features = DEFAULT_PLATFORM.features
    for form in Reader(text, features, path=path).iter_forms():
        if is_ns_decl(form):
            return form
    return None


def read_file_ns_decl(path: Union[str, Path],
                      features: Optional[FrozenSet[str]] = None) -> Optional[SList]:
    """Read the ns declaration of a source file.

    Only as much of the file as the header needs is read: a growing prefix
    is parsed until it yields the ns form or the whole file has been read.
    Unreadable files and files without a recognizable declaration both
    yield None; the reason is logged at debug level.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return _read_header_decl(f, features, path)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None
    except DeclarationError as e:
        logger.debug("No ns declaration in %s: %s", path, e)
        return None


def _read_header_decl(f: TextIO, features: Optional[FrozenSet[str]],
                      path: Union[str, Path]) -> Optional[SList]:
    text = ""
    size = HEADER_CHUNK
    while True:
        chunk = f.read(size)
        text += chunk
        try:
            decl = read_ns_decl(text, features, path=path)
        except DeclarationError:
            # A truncated prefix can end mid-form
            if not chunk:
                raise
            decl = None
        if decl is not None or not chunk:
            return decl
        size *= 2


def name_from_ns_decl(decl: Optional[SList]) -> Optional[str]:
    """Namespace name declared by an ns form."""
    if decl is None or len(decl) < 2 or not isinstance(decl[1], Symbol):
        return None
    return str(decl[1])


def _is_clause_head(form: object) -> bool:
    return isinstance(form, (Keyword, Symbol)) and str(form) in DEPENDENCY_CLAUSES


def _join(prefix: Optional[str], name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _deps_from_libspec(prefix: Optional[str], form: object) -> Set[str]:
    if isinstance(form, Symbol):
        return {_join(prefix, form)}

    if isinstance(form, (SList, Vector)) and form and isinstance(form[0], Symbol):
        head, rest = form[0], form[1:]
        # [lib.name :as alias ...]
        if not rest or isinstance(rest[0], Keyword):
            return {_join(prefix, head)}
        # Prefix list: (prefix lib1 [lib2 :as x])
        deps: Set[str] = set()
        for item in rest:
            deps |= _deps_from_libspec(_join(prefix, head), item)
        return deps

    # Flags such as :reload, and string libspecs for JS modules
    return set()


def _deps_from_clause(clause: Iterable[object]) -> Set[str]:
    deps: Set[str] = set()
    for libspec in clause:
        deps |= _deps_from_libspec(None, libspec)
    return deps


def deps_from_ns_decl(decl: Optional[SList]) -> Set[str]:
    """Names of all namespaces required by an ns form."""
    if decl is None:
        return set()
    deps: Set[str] = set()
    for clause in decl[2:]:
        if isinstance(clause, SList) and clause and _is_clause_head(clause[0]):
            deps |= _deps_from_clause(clause[1:])
    return deps
