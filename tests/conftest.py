from __future__ import annotations

from typing import List, Tuple

import pytest
from rdflib import Graph
from rdflib.compare import isomorphic, to_isomorphic
from rdflib.term import Node

from json2rdf.sinks import TripleSink
from json2rdf.tokens import JsonTokenSource
from json2rdf.writer import convert

BASE = "http://localhost/"
NS = BASE + "#"


class RecordingSink(TripleSink):
    def __init__(self):
        self.calls: List[str] = []
        self.triples: List[Tuple[Node, Node, Node]] = []

    def begin(self) -> None:
        self.calls.append("begin")

    def triple(self, subject: Node, predicate: Node, obj: Node) -> None:
        self.calls.append("triple")
        self.triples.append((subject, predicate, obj))

    def end(self) -> None:
        self.calls.append("end")


def record(json_text: str, base: str = BASE) -> RecordingSink:
    sink = RecordingSink()
    convert(JsonTokenSource(json_text), base, sink)
    return sink


def assert_isomorphic(expected: Graph, got: Graph) -> None:
    if not isomorphic(expected, got):
        exp = sorted(to_isomorphic(expected).serialize(format="nt").splitlines())
        act = sorted(to_isomorphic(got).serialize(format="nt").splitlines())
        pytest.fail(f"Graphs not isomorphic\nexpected: {exp}\ngot: {act}")
