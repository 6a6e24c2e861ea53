"""
Streaming JSON -> RDF conversion.

Every JSON object becomes a blank node, every key a predicate under the base
IRI, every scalar a typed literal on the enclosing object. Arrays produce no
nodes of their own: their elements attach to the subject and predicate that
owns the array, however deeply arrays are nested.

State (all bounded by nesting depth):
- subject stack : blank nodes of the currently open objects (top = subject)
- property      : the single active predicate slot
- array props   : subject -> predicate that was active when its array opened,
                  restored when a nested object inside that array closes
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from rdflib import BNode, Graph, URIRef
from rdflib.term import Node

from json2rdf.literals import boolean_literal, number_literal, string_literal
from json2rdf.sinks import GraphSink, TripleSink
from json2rdf.tokens import Event, JsonTokenSource, Source, Token
from json2rdf.uris import build_predicate, validate_base

logger = logging.getLogger(__name__)


class TokenStreamError(ValueError):
    """Raised when a scalar token arrives where no triple can be formed."""


class JsonStreamRDFWriter:
    def __init__(self, base: str):
        self.base = validate_base(base)
        self.subject_stack: List[BNode] = []
        self.array_properties: Dict[BNode, URIRef] = {}
        self.property: Optional[URIRef] = None

    def _subject(self, token: Token) -> BNode:
        if not self.subject_stack:
            raise TokenStreamError(f"{token.event.value} value outside of any JSON object")
        return self.subject_stack[-1]

    def _property(self, token: Token) -> URIRef:
        if self.property is None:
            raise TokenStreamError(f"{token.event.value} value without a key")
        return self.property

    def feed(self, token: Token, sink: TripleSink) -> None:
        event = token.event

        if event is Event.START_ARRAY:
            if self.subject_stack and self.property is not None:
                self.array_properties[self.subject_stack[-1]] = self.property

        elif event is Event.END_ARRAY:
            if self.subject_stack:
                self.array_properties.pop(self.subject_stack[-1], None)

        elif event is Event.START_OBJECT:
            subject = BNode()
            # link to the parent with the current (array) property, if any
            if self.property is not None and self.subject_stack:
                sink.triple(self.subject_stack[-1], self.property, subject)
            self.subject_stack.append(subject)

        elif event is Event.END_OBJECT:
            self.subject_stack.pop()
            # restore the property of the array we are back in, if any
            if self.subject_stack and self.subject_stack[-1] in self.array_properties:
                self.property = self.array_properties[self.subject_stack[-1]]

        elif event is Event.KEY:
            self.property = build_predicate(self.base, token.value)

        elif event is Event.TRUE or event is Event.FALSE:
            sink.triple(self._subject(token), self._property(token), boolean_literal(event is Event.TRUE))

        elif event is Event.STRING:
            if self.property is not None:
                sink.triple(self._subject(token), self.property, string_literal(token.value))

        elif event is Event.NUMBER:
            sink.triple(self._subject(token), self._property(token), number_literal(token.value))

        # Event.NULL: no fact

    def write(self, tokens: Iterable[Token], sink: TripleSink) -> None:
        for token in tokens:
            self.feed(token, sink)


class _CountingSink(TripleSink):
    def __init__(self, inner: TripleSink):
        self.inner = inner
        self.count = 0

    def triple(self, subject: Node, predicate: Node, obj: Node) -> None:
        self.count += 1
        self.inner.triple(subject, predicate, obj)


def convert(tokens: Iterable[Token], base: str, sink: TripleSink) -> None:
    """
    Drive one conversion: sink.begin(), every token through the writer,
    sink.end(). Tokenizer errors propagate and end() is then never called.
    """
    writer = JsonStreamRDFWriter(base)
    counting = _CountingSink(sink)

    sink.begin()
    logger.debug("Converting JSON with base %s", writer.base)
    writer.write(tokens, counting)
    sink.end()
    logger.debug("Emitted %d triples", counting.count)


def json_to_graph(source: Source, base: str, graph: Optional[Graph] = None) -> Graph:
    sink = GraphSink(graph)
    convert(JsonTokenSource(source), base, sink)
    return sink.graph
