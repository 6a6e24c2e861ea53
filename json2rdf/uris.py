"""
Base IRI / predicate IRI helpers for json2rdf.

Rules:
- The base must be an absolute IRI (it has a scheme) with no characters that
  are illegal in IRIs.
- Predicates are fragment IRIs: base (without its own fragment) + "#" + the
  percent-encoded JSON key. The same key text always gives the same IRI.
"""

from __future__ import annotations

from urllib.parse import quote, urldefrag, urlsplit

from rdflib import URIRef

_INVALID_IRI_CHARS = '<>" {}|\\^`'


class InvalidBaseIRI(ValueError):
    """Raised when the base cannot be used to resolve predicate IRIs."""

    def __init__(self, base: object, reason: str):
        super().__init__(f"Invalid base IRI {base!r}: {reason}")
        self.base = base
        self.reason = reason


# -----------------------------
# Helpers
# -----------------------------

# RFC3987 ucschar: non-ASCII characters allowed as-is in an IRI fragment
_UCSCHAR_RANGES = (
    (0xA0, 0xD7FF), (0xF900, 0xFDCF), (0xFDF0, 0xFFEF),
    (0x10000, 0x1FFFD), (0x20000, 0x2FFFD), (0x30000, 0x3FFFD),
    (0x40000, 0x4FFFD), (0x50000, 0x5FFFD), (0x60000, 0x6FFFD),
    (0x70000, 0x7FFFD), (0x80000, 0x8FFFD), (0x90000, 0x9FFFD),
    (0xA0000, 0xAFFFD), (0xB0000, 0xBFFFD), (0xC0000, 0xCFFFD),
    (0xD0000, 0xDFFFD), (0xE1000, 0xEFFFD),
)


def _is_ucschar(ch: str) -> bool:
    cp = ord(ch)
    return any(lo <= cp <= hi for lo, hi in _UCSCHAR_RANGES)


def _encode_component(s: str) -> str:
    """
    Percent-encode a key as a single IRI component (NOT a full URL).
    ASCII outside the RFC3986 unreserved set is encoded; non-ASCII letters
    stay as they are ("ключ" -> "ключ", "a b" -> "a%20b").
    """
    return "".join(ch if _is_ucschar(ch) else quote(ch, safe="") for ch in s)


def validate_base(base: object) -> str:
    if base is None:
        raise InvalidBaseIRI(base, "must not be None")
    s = str(base).strip()
    if not s:
        raise InvalidBaseIRI(base, "must not be empty")
    for c in _INVALID_IRI_CHARS:
        if c in s:
            raise InvalidBaseIRI(base, f"contains illegal character {c!r}")
    try:
        parts = urlsplit(s)
    except ValueError as e:
        raise InvalidBaseIRI(base, str(e)) from e
    if not parts.scheme:
        raise InvalidBaseIRI(base, "must be absolute (missing scheme)")
    return s


# -----------------------------
# Public IRI constructors
# -----------------------------

def build_predicate(base: str, key: str) -> URIRef:
    """
    Predicate IRI for a JSON key.
    Example: build_predicate("http://localhost/", "first name")
             -> http://localhost/#first%20name
    """
    doc, _ = urldefrag(base)
    return URIRef(f"{doc}#{_encode_component(key)}")
