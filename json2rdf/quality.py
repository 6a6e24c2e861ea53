from __future__ import annotations

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Set

from rdflib import BNode, Literal
from rdflib.term import Node

from json2rdf.sinks import TripleSink


def percent(part: int, whole: int) -> float:
    return round((part / whole * 100.0), 2) if whole else 0.0


class ConversionStats(TripleSink):
    """
    Counts what a conversion emitted; chain it next to the real sink with TeeSink.

    Resource counts need every blank node seen so far, so unlike the
    conversion itself this sink uses memory proportional to the document.
    """

    def __init__(self, inputs: Optional[Dict[str, str]] = None):
        self.inputs = inputs or {}
        self.triples = 0
        self.subjects: Set[Node] = set()
        self.linked: Set[Node] = set()
        self.predicates: Counter = Counter()
        self.datatypes: Counter = Counter()
        self.finished = False

    def triple(self, subject: Node, predicate: Node, obj: Node) -> None:
        self.triples += 1
        self.subjects.add(subject)
        self.predicates[str(predicate)] += 1
        if isinstance(obj, BNode):
            self.linked.add(obj)
        elif isinstance(obj, Literal):
            dt = str(obj.datatype) if obj.datatype is not None else "plain"
            self.datatypes[dt] += 1

    def end(self) -> None:
        self.finished = True

    def to_metrics(self) -> Dict[str, Any]:
        resources = self.subjects | self.linked
        literals = sum(self.datatypes.values())
        return {
            "generatedAtTime": datetime.now(timezone.utc).isoformat(),
            "inputs": dict(self.inputs),
            "complete": self.finished,
            "size": {"triples": self.triples},
            "entities": {
                "resources": len(resources),
                "resources_with_properties": len(self.subjects),
                "distinct_predicates": len(self.predicates),
            },
            "objects": {
                "literals": {"count": literals, "percent": percent(literals, self.triples)},
                "resources": {
                    "count": self.triples - literals,
                    "percent": percent(self.triples - literals, self.triples),
                },
            },
            "predicates": dict(self.predicates.most_common()),
            "datatypes": dict(self.datatypes.most_common()),
        }

    def write_metrics(self, out_path: Path) -> None:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(self.to_metrics(), ensure_ascii=False, indent=2), encoding="utf-8")
