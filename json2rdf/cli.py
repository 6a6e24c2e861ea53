#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import List, Optional

import ijson

from json2rdf.config import (
    DEFAULT_BASE,
    DEFAULT_FORMAT,
    ENV_BASE,
    ENV_INPUT,
    ENV_OUT,
    OUTPUT_FORMATS,
    ConvertOptions,
    resolve_options,
)
from json2rdf.quality import ConversionStats
from json2rdf.sinks import GraphSink, NTriplesSink, TeeSink, TripleSink
from json2rdf.tokens import JsonTokenSource
from json2rdf.uris import InvalidBaseIRI
from json2rdf.writer import JsonStreamRDFWriter, TokenStreamError, convert

logger = logging.getLogger(__name__)


class OutputFormatError(ValueError):
    """Raised when the converted graph cannot be written in the requested format."""


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="json2rdf",
        description="Stream arbitrary JSON into RDF: objects -> blank nodes, keys -> <base>#key, scalars -> literals.",
    )
    ap.add_argument(
        "base",
        nargs="?",
        default=None,
        help=f"Base IRI for predicates (env {ENV_BASE}, default: {DEFAULT_BASE}).",
    )
    ap.add_argument("--json", default=None, help=f"Input JSON path (env {ENV_INPUT}; default: stdin).")
    ap.add_argument("--out", default=None, help=f"Output path (env {ENV_OUT}; default: stdout).")
    ap.add_argument(
        "--format",
        dest="fmt",
        default=DEFAULT_FORMAT,
        choices=OUTPUT_FORMATS,
        help="Output RDF format. 'nt' is streamed; others are built in memory (default: nt).",
    )
    ap.add_argument(
        "--stats",
        default=None,
        help=(
            "Optional JSON metrics log path. Distinct resources are tracked, "
            "so memory grows with the document size (output stays streamed)."
        ),
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr.")
    return ap


def run(opts: ConvertOptions) -> None:
    # validate the base before touching any input / output
    JsonStreamRDFWriter(opts.base)

    if opts.input_path is not None and not opts.input_path.exists():
        raise FileNotFoundError(f"Input JSON not found: {opts.input_path}")

    with ExitStack() as stack:
        if opts.input_path is not None:
            src = stack.enter_context(open(opts.input_path, "rb"))
        else:
            src = sys.stdin.buffer

        if opts.out_path is not None:
            opts.out_path.parent.mkdir(parents=True, exist_ok=True)
            out = stack.enter_context(open(opts.out_path, "w", encoding="utf-8", newline="\n"))
        else:
            out = sys.stdout

        graph_sink: Optional[GraphSink] = None
        if opts.streaming:
            sink: TripleSink = NTriplesSink(out)
        else:
            graph_sink = GraphSink()
            sink = graph_sink

        stats: Optional[ConversionStats] = None
        if opts.stats_path is not None:
            stats = ConversionStats(inputs={
                "json": str(opts.input_path) if opts.input_path else "<stdin>",
                "base": opts.base,
            })
            sink = TeeSink(sink, stats)

        convert(JsonTokenSource(src, buf_size=opts.buf_size), opts.base, sink)

        if graph_sink is not None:
            try:
                data = graph_sink.graph.serialize(format=opts.fmt)
            except ValueError as e:
                # e.g. RDF/XML needs a QName for every predicate ("#1" has none)
                raise OutputFormatError(f"Cannot serialize as {opts.fmt}: {e}") from e
            out.write(data)

    # stdout carries the RDF unless --out was given
    status = sys.stdout if opts.out_path is not None else sys.stderr
    if opts.out_path is not None:
        print(f"Wrote: {opts.out_path}", file=status)
    if stats is not None:
        stats.write_metrics(opts.stats_path)
        print(f"Wrote: {opts.stats_path}", file=status)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    opts = resolve_options(
        base=args.base,
        input_path=args.json,
        out_path=args.out,
        fmt=args.fmt,
        stats_path=args.stats,
    )

    logger.debug("Options: %s", opts)

    try:
        run(opts)
    except ijson.JSONError as e:
        print(f"Invalid JSON: {e}", file=sys.stderr)
        return 1
    except (InvalidBaseIRI, TokenStreamError, OutputFormatError, FileNotFoundError) as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
