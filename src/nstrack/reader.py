"""Reader for the header forms of Clojure-family source files.

Only as much of the syntax as is needed to find and interpret an ``ns``
declaration is supported: collections, atoms, comments, metadata, quoting,
dispatch macros and reader conditionals. Forms are read lazily, one
top-level form at a time, so callers can stop as soon as they have what
they need without reading the rest of the file.
"""

from typing import FrozenSet, Iterator, List, Optional, Union
from pathlib import Path

from .errors import DeclarationError


class Symbol(str):
    """A bare symbol such as ``ns`` or ``example.core``."""

    def __repr__(self) -> str:
        return f"Symbol({str(self)!r})"


class Keyword(str):
    """A keyword, stored without its leading colon(s)."""

    def __repr__(self) -> str:
        return f"Keyword({str(self)!r})"


class Char(str):
    """A character literal, stored without the backslash."""


class Regex(str):
    """A regex literal, stored as its raw pattern text."""


class SList(tuple):
    """A parenthesized list."""


class Vector(tuple):
    """A bracketed vector."""


class Map(tuple):
    """A map literal, stored as a tuple of (key, value) pairs."""


class SetForm(tuple):
    """A set literal ``#{...}``."""


class _Splice(tuple):
    """Forms produced by ``#?@`` to be spliced into the enclosing collection."""


_EOF = object()
_NOTHING = object()

_WHITESPACE = frozenset(" \t\r\n,\f")
_DELIMITERS = _WHITESPACE | frozenset('()[]{}";')
_CLOSERS = {")": "(", "]": "[", "}": "{"}
_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", '"': '"', "\\": "\\"}


class Reader:
    """Reads forms from source text.

    Args:
        text: Source text
        features: Reader conditional features to select (e.g. ``{"clj"}``)
        path: File the text came from, used in error messages
    """

    def __init__(
        self,
        text: str,
        features: FrozenSet[str] = frozenset({"clj"}),
        path: Optional[Union[str, Path]] = None,
    ):
        self.text = text
        self.features = frozenset(features)
        self.path = path
        self.pos = 0

    def iter_forms(self) -> Iterator[object]:
        """Yield top-level forms until the end of the text."""
        while True:
            form = self._read()
            if form is _EOF:
                return
            if form is _NOTHING:
                continue
            if isinstance(form, _Splice):
                yield from form
                continue
            yield form

    # ----- internals -----

    def _error(self, message: str) -> DeclarationError:
        line = self.text.count("\n", 0, self.pos) + 1
        return DeclarationError(f"{message} (line {line})", self.path)

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _skip_line(self) -> None:
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end == -1 else end + 1

    def _read_required(self) -> object:
        """Read the next real form; end of input is an error here."""
        while True:
            form = self._read()
            if form is _EOF:
                raise self._error("Unexpected end of input")
            if form is not _NOTHING:
                return form

    def _read(self) -> object:
        self._skip_whitespace()
        if self.pos >= len(self.text):
            return _EOF

        ch = self.text[self.pos]
        if ch == ";":
            self._skip_line()
            return _NOTHING
        if ch == "(":
            self.pos += 1
            return SList(self._read_seq(")"))
        if ch == "[":
            self.pos += 1
            return Vector(self._read_seq("]"))
        if ch == "{":
            self.pos += 1
            return self._make_map(self._read_seq("}"))
        if ch in _CLOSERS:
            raise self._error(f"Unmatched delimiter {ch!r}")
        if ch == '"':
            return self._read_string()
        if ch == "\\":
            return self._read_char()
        if ch in "'`":
            self.pos += 1
            return SList((Symbol("quote"), self._read_required()))
        if ch == "~":
            self.pos += 1
            head = "unquote"
            if self._peek() == "@":
                self.pos += 1
                head = "unquote-splicing"
            return SList((Symbol(head), self._read_required()))
        if ch == "@":
            self.pos += 1
            return SList((Symbol("deref"), self._read_required()))
        if ch == "^":
            self.pos += 1
            self._read_required()  # metadata is dropped
            return self._read_required()
        if ch == "#":
            return self._read_dispatch()
        return self._read_atom(self._read_token())

    def _read_seq(self, closer: str) -> List[object]:
        items: List[object] = []
        while True:
            self._skip_whitespace()
            if self.pos >= len(self.text):
                raise self._error(f"Missing closing {closer!r}")
            if self.text[self.pos] == closer:
                self.pos += 1
                return items
            form = self._read()
            if form is _NOTHING:
                continue
            if isinstance(form, _Splice):
                items.extend(form)
            else:
                items.append(form)

    def _make_map(self, items: List[object]) -> Map:
        if len(items) % 2:
            raise self._error("Map literal must contain an even number of forms")
        return Map(zip(items[0::2], items[1::2]))

    def _read_token(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in _DELIMITERS:
            self.pos += 1
        return self.text[start:self.pos]

    def _read_atom(self, token: str) -> object:
        if token.startswith(":"):
            return Keyword(token.lstrip(":"))
        if token == "nil":
            return None
        if token == "true":
            return True
        if token == "false":
            return False
        if token[0].isdigit() or (token[0] in "+-" and len(token) > 1 and token[1].isdigit()):
            try:
                return int(token.rstrip("N"))
            except ValueError:
                pass
            try:
                return float(token.rstrip("M"))
            except ValueError:
                pass
        return Symbol(token)

    def _read_raw_string(self) -> str:
        # Assumes self.pos is on the opening quote
        self.pos += 1
        chunks: List[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == '"':
                self.pos += 1
                return "".join(chunks)
            if ch == "\\":
                chunks.append(self.text[self.pos:self.pos + 2])
                self.pos += 2
                continue
            chunks.append(ch)
            self.pos += 1
        raise self._error("Unterminated string literal")

    def _read_string(self) -> str:
        raw = self._read_raw_string()
        out: List[str] = []
        i = 0
        while i < len(raw):
            if raw[i] == "\\" and i + 1 < len(raw):
                out.append(_STRING_ESCAPES.get(raw[i + 1], raw[i + 1]))
                i += 2
            else:
                out.append(raw[i])
                i += 1
        return "".join(out)

    def _read_char(self) -> Char:
        self.pos += 1
        if self.pos >= len(self.text):
            raise self._error("Incomplete character literal")
        start = self.pos
        self.pos += 1
        while self.pos < len(self.text) and self.text[self.pos] not in _DELIMITERS:
            self.pos += 1
        return Char(self.text[start:self.pos])

    def _read_dispatch(self) -> object:
        self.pos += 1
        ch = self._peek()
        if ch == "_":
            self.pos += 1
            self._read_required()
            return _NOTHING
        if ch == "!":
            self._skip_line()
            return _NOTHING
        if ch == "{":
            self.pos += 1
            return SetForm(self._read_seq("}"))
        if ch == "(":
            self.pos += 1
            return SList(self._read_seq(")"))
        if ch == '"':
            return Regex(self._read_raw_string())
        if ch == "'":
            self.pos += 1
            return SList((Symbol("var"), self._read_required()))
        if ch == "#":
            self.pos += 1
            return Symbol("##" + self._read_token())
        if ch == "?":
            return self._read_conditional()
        if ch == ":":
            # Namespaced map: the prefix is dropped
            self._read_token()
            return self._read_required()
        if ch == "" or ch in _DELIMITERS:
            raise self._error("Invalid dispatch macro")
        # Tagged literal: keep only the value
        self._read_token()
        return self._read_required()

    def _read_conditional(self) -> object:
        self.pos += 1
        splicing = False
        if self._peek() == "@":
            splicing = True
            self.pos += 1
        self._skip_whitespace()
        if self._peek() != "(":
            raise self._error("Reader conditional must be a list")
        self.pos += 1
        branches = self._read_seq(")")
        if len(branches) % 2:
            raise self._error("Reader conditional requires an even number of forms")

        for feature, form in zip(branches[0::2], branches[1::2]):
            if not isinstance(feature, Keyword):
                raise self._error("Reader conditional feature must be a keyword")
            if feature in self.features or feature == "default":
                if splicing:
                    if not isinstance(form, (SList, Vector)):
                        raise self._error("Spliced reader conditional must be a sequence")
                    return _Splice(form)
                return form
        return _NOTHING


def read_forms(text: str, features: FrozenSet[str] = frozenset({"clj"})) -> Iterator[object]:
    """Iterate over the top-level forms of ``text``."""
    return Reader(text, features).iter_forms()
