from __future__ import annotations

import math
import re

import numpy as np
from rdflib import Literal
from rdflib.namespace import XSD

INT32_MIN: int = -(2 ** 31)
INT32_MAX: int = 2 ** 31 - 1

_INT_RE = re.compile(r"^[+-]?\d+$")


def boolean_literal(value: bool) -> Literal:
    return Literal("true" if value else "false", datatype=XSD.boolean)


def string_literal(text: str) -> Literal:
    return Literal(text)


def parse_int32(text: str):
    """Return the int value of ``text`` if it is a 32-bit signed integer, else None."""
    s = text.strip()
    if not _INT_RE.match(s):
        return None
    v = int(s)
    if v < INT32_MIN or v > INT32_MAX:
        return None
    return v


def float32_lexical(text: str) -> str:
    """
    Narrow the decimal text to a 32-bit float and return its shortest
    xsd:float lexical form ("66.6", "1e+30", "INF").
    Raises ValueError when the text is not a number at all.
    """
    with np.errstate(over="ignore", under="ignore"):
        f = np.float32(text.strip())
    if math.isinf(f):
        return "INF" if f > 0 else "-INF"
    if math.isnan(f):
        return "NaN"
    return str(f)


def number_literal(text: str) -> Literal:
    """
    Number tokens:
      1) 32-bit signed integer -> xsd:int
      2) anything else (out of range, fraction, exponent) -> xsd:float
    Both tiers are narrowing; large integers and doubles lose precision.
    """
    i = parse_int32(text)
    if i is not None:
        return Literal(str(i), datatype=XSD.int)
    return Literal(float32_lexical(text), datatype=XSD.float)
