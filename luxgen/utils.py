# File: luxgen/utils.py
"""
Lux Generator - Utility Functions & Helpers
============================================
Naming derivation, literal quoting for the generated TypeScript, and
file-system helpers shared by the pipeline.

String helpers are wrapped in ``functools.lru_cache``: the same handful of
entity names is asked for over and over while one module is rendered.
"""

from __future__ import annotations

import functools
import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import FrozenSet, List, Optional, Sequence

from luxgen.models import EntityNames, SchemaDocument

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("luxgen.utils")

# ---------------------------------------------------------------------------
# Reserved words
# ---------------------------------------------------------------------------

# Entity names end up as bare identifiers in the generated TypeScript
# (``const books = ref(...)``), so they must not be JS/TS keywords.
JS_RESERVED_WORDS: FrozenSet[str] = frozenset({
    "abstract", "any", "as", "async", "await", "boolean", "break", "case",
    "catch", "class", "const", "constructor", "continue", "debugger",
    "declare", "default", "delete", "do", "else", "enum", "export",
    "extends", "false", "finally", "for", "from", "function", "get", "if",
    "implements", "import", "in", "infer", "instanceof", "interface", "is",
    "keyof", "let", "module", "namespace", "never", "new", "null", "number",
    "object", "of", "package", "private", "protected", "public", "readonly",
    "require", "return", "set", "static", "string", "super", "switch",
    "symbol", "this", "throw", "true", "try", "type", "typeof", "undefined",
    "unique", "unknown", "var", "void", "while", "with", "yield",
})

# Identifiers every generated store/view already declares.
GENERATED_IDENTIFIERS: FrozenSet[str] = frozenset({
    "loading", "error", "errors", "columns", "modal", "router", "apiato",
    "axios", "ref", "refs", "data", "result", "results", "mongoose",
    "schema", "schemas", "swal",
})


@functools.lru_cache(maxsize=None)
def is_reserved_word(word: str) -> bool:
    """True when *word* cannot be used as a bare identifier in generated code."""
    return word in JS_RESERVED_WORDS or word in GENERATED_IDENTIFIERS


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def capitalize(word: str) -> str:
    """
    Upper-case the first character and leave the rest untouched.

    Examples:
        >>> capitalize("book")
        'Book'
        >>> capitalize("orderItem")
        'OrderItem'
    """
    if not word:
        return word
    return word[0].upper() + word[1:]


@functools.lru_cache(maxsize=None)
def pluralize(word: str) -> str:
    """
    English plural by one fixed rule: trailing ``y`` becomes ``ies``,
    anything else gets an ``s``.

    Examples:
        >>> pluralize("category")
        'categories'
        >>> pluralize("book")
        'books'
    """
    if not word:
        return word
    if word.endswith("y"):
        return word[:-1] + "ies"
    return word + "s"


@functools.lru_cache(maxsize=None)
def derive_names(
    name: str,
    *,
    capitalized: Optional[str] = None,
    plural: Optional[str] = None,
    capitalized_plural: Optional[str] = None,
    path: Optional[str] = None,
) -> EntityNames:
    """
    Derive every identifier form of an entity from its lower-case name.

    Explicit overrides win over the heuristics; a plural override also
    feeds the capitalized plural and the path unless those are given too.
    """
    resolved_plural: str = plural or pluralize(name)
    names = EntityNames(
        name=name,
        capitalized=capitalized or capitalize(name),
        plural=resolved_plural,
        capitalized_plural=capitalized_plural or capitalize(resolved_plural),
        path=path or resolved_plural,
    )
    logger.debug("Derived names for '%s': %r", name, names)
    return names


def names_for_document(document: SchemaDocument) -> EntityNames:
    """Derive names for a document, honouring its optional overrides."""
    return derive_names(
        document.name,
        capitalized=document.capitalized,
        plural=document.name_plural,
        capitalized_plural=document.capitalized_plural,
        path=document.path,
    )


# ---------------------------------------------------------------------------
# Literal helpers for generated code
# ---------------------------------------------------------------------------


def ts_string(value: str) -> str:
    """Single-quoted TypeScript string literal."""
    escaped: str = (
        value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    )
    return f"'{escaped}'"


def ts_string_list(values: Sequence[str]) -> str:
    """``['a', 'b']``"""
    return "[" + ", ".join(ts_string(v) for v in values) + "]"


def doc_yaml_string(value: str) -> str:
    """Double-quoted YAML scalar that is also safe inside a JSDoc block."""
    return json.dumps(value, ensure_ascii=False).replace("*/", "*\\/")


def html_attr(value: str) -> str:
    """Escape text for use inside a double-quoted HTML attribute."""
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def html_text(value: str) -> str:
    """Escape text for use as element content in a Vue template."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("{{", "{ {")
    )


def join_lines(lines: Sequence[str]) -> str:
    """Join rendered lines into file content with exactly one trailing newline."""
    return "\n".join(lines).rstrip("\n") + "\n"


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)


def write_file(path: Path, content: str) -> int:
    """
    Write *content* to *path* atomically.

    The data goes to a temporary file in the target directory first and is
    then renamed over the destination, so readers never see a half-written
    file.  Returns the number of bytes written.
    """
    ensure_directory(path.parent)
    encoded: bytes = content.encode("utf-8")

    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(encoded)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, str(path))
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager timer for pipeline steps.

    Usage:
        with Timer("assemble book") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "JS_RESERVED_WORDS",
    "GENERATED_IDENTIFIERS",
    "is_reserved_word",
    "capitalize",
    "pluralize",
    "derive_names",
    "names_for_document",
    "ts_string",
    "ts_string_list",
    "doc_yaml_string",
    "html_attr",
    "html_text",
    "join_lines",
    "ensure_directory",
    "write_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]

logger.debug("luxgen.utils loaded: %d public symbols.", len(__all__))
