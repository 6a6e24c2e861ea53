from __future__ import annotations

import logging
from typing import List, Optional, TextIO

from rdflib import Graph, Literal
from rdflib.term import Node

logger = logging.getLogger(__name__)

_NT_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\t": "\\t",
    "\b": "\\b",
    "\n": "\\n",
    "\r": "\\r",
    "\f": "\\f",
}


def escape_string_value(value: str) -> str:
    out: List[str] = []
    for ch in value:
        cp = ord(ch)
        if ch in _NT_ESCAPES:
            out.append(_NT_ESCAPES[ch])
        elif cp < 0x20 or cp in (0x7F, 0xFFFE, 0xFFFF):
            out.append(f"\\u{cp:04X}")
        else:
            out.append(ch)
    return "".join(out)


def format_node_nt(node: Node) -> str:
    """
    Format an rdflib term using N-Triples syntax (always single-line).

    Literal.n3() is not used for literals: multi-line text comes out as a
    Turtle triple-quoted string, which N-Triples does not have.
    """
    if isinstance(node, Literal):
        base = f'"{escape_string_value(str(node))}"'
        if node.language is not None:
            return f"{base}@{node.language}"
        if node.datatype is not None:
            return f"{base}^^<{node.datatype}>"
        return base
    return node.n3()


class TripleSink:
    """
    Receives triples in emission order, bracketed by begin() / end().
    end() is only called after the whole token stream was consumed.
    """

    def begin(self) -> None:
        pass

    def triple(self, subject: Node, predicate: Node, obj: Node) -> None:
        raise NotImplementedError

    def end(self) -> None:
        pass


class GraphSink(TripleSink):
    def __init__(self, graph: Optional[Graph] = None):
        self.graph = graph if graph is not None else Graph()

    def triple(self, subject: Node, predicate: Node, obj: Node) -> None:
        self.graph.add((subject, predicate, obj))


class NTriplesSink(TripleSink):
    """Writes one N-Triples line per triple as soon as it is emitted."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0

    def triple(self, subject: Node, predicate: Node, obj: Node) -> None:
        self.stream.write(f"{format_node_nt(subject)} {format_node_nt(predicate)} {format_node_nt(obj)} .\n")
        self.count += 1

    def end(self) -> None:
        self.stream.flush()
        logger.debug("N-Triples written: %d", self.count)


class TeeSink(TripleSink):
    def __init__(self, *sinks: TripleSink):
        self.sinks: List[TripleSink] = list(sinks)

    def begin(self) -> None:
        for s in self.sinks:
            s.begin()

    def triple(self, subject: Node, predicate: Node, obj: Node) -> None:
        for s in self.sinks:
            s.triple(subject, predicate, obj)

    def end(self) -> None:
        for s in self.sinks:
            s.end()
