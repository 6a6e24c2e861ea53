# config.py
"""
Centralized configuration for the json2rdf command line.

Every setting resolves as: CLI flag -> environment variable -> default below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


# -----------------------------
# 1) Defaults
# -----------------------------
DEFAULT_BASE: str = "http://localhost/"
DEFAULT_FORMAT: str = "nt"

# Tokenizer read size (bytes)
DEFAULT_BUF_SIZE: int = 64 * 1024


# -----------------------------
# 2) Environment overrides
# -----------------------------
ENV_BASE = "JSON2RDF_BASE"
ENV_INPUT = "JSON2RDF_INPUT"
ENV_OUT = "JSON2RDF_OUT"


# -----------------------------
# 3) Output formats
# -----------------------------
# "nt" is streamed triple by triple; the rest are rdflib serializers and
# need the whole graph in memory.
STREAMING_FORMAT: str = "nt"
OUTPUT_FORMATS: Tuple[str, ...] = ("nt", "turtle", "xml", "json-ld", "n3", "trig")


@dataclass(frozen=True)
class ConvertOptions:
    base: str
    input_path: Optional[Path]   # None = stdin
    out_path: Optional[Path]     # None = stdout
    fmt: str = DEFAULT_FORMAT
    stats_path: Optional[Path] = None
    buf_size: int = DEFAULT_BUF_SIZE

    @property
    def streaming(self) -> bool:
        return self.fmt == STREAMING_FORMAT


def _optional_path(raw: str) -> Optional[Path]:
    return Path(raw).expanduser().resolve() if raw else None


def resolve_options(
    base: Optional[str] = None,
    input_path: Optional[str] = None,
    out_path: Optional[str] = None,
    fmt: Optional[str] = None,
    stats_path: Optional[str] = None,
) -> ConvertOptions:
    fmt = fmt or DEFAULT_FORMAT
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"format must be one of {', '.join(OUTPUT_FORMATS)}")

    return ConvertOptions(
        base=base or os.environ.get(ENV_BASE, "") or DEFAULT_BASE,
        input_path=_optional_path(input_path or os.environ.get(ENV_INPUT, "")),
        out_path=_optional_path(out_path or os.environ.get(ENV_OUT, "")),
        fmt=fmt,
        stats_path=_optional_path(stats_path or ""),
    )
