from __future__ import annotations

import io
import json

import pytest
from rdflib import Graph

from json2rdf import cli
from json2rdf.config import ENV_BASE, ENV_INPUT, ENV_OUT, resolve_options

DOC = '{ "name": "x", "tags": [ "a", { "k": 1 }, "b" ], "ok": false }'


def write_json(tmp_path, text=DOC):
    path = tmp_path / "in.json"
    path.write_text(text, encoding="utf-8")
    return path


def test_ntriples_to_file(tmp_path, capsys):
    src = write_json(tmp_path)
    out = tmp_path / "out" / "doc.nt"
    assert cli.main(["http://example.org/", "--json", str(src), "--out", str(out)]) == 0

    g = Graph().parse(str(out), format="nt")
    assert len(g) == 6
    assert "Wrote:" in capsys.readouterr().out


def test_turtle_to_stdout(tmp_path, capsys):
    src = write_json(tmp_path)
    assert cli.main(["http://example.org/", "--json", str(src), "--format", "turtle"]) == 0
    g = Graph().parse(data=capsys.readouterr().out, format="turtle")
    assert len(g) == 6


def test_stdin_input(monkeypatch, capsys):
    monkeypatch.delenv(ENV_INPUT, raising=False)
    monkeypatch.delenv(ENV_OUT, raising=False)
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b'{"a": "b"}')))
    assert cli.main(["http://example.org/"]) == 0
    assert capsys.readouterr().out.strip().endswith('<http://example.org/#a> "b" .')


def test_stats_log(tmp_path):
    src = write_json(tmp_path)
    out = tmp_path / "doc.nt"
    stats = tmp_path / "stats.json"
    assert cli.main(["--json", str(src), "--out", str(out), "--stats", str(stats)]) == 0
    m = json.loads(stats.read_text(encoding="utf-8"))
    assert m["size"]["triples"] == 6
    assert m["complete"] is True
    assert m["inputs"]["json"] == str(src.resolve())


def test_invalid_json_exit_code(tmp_path, capsys):
    src = write_json(tmp_path, "{ ")
    assert cli.main(["--json", str(src), "--out", str(tmp_path / "o.nt")]) == 1
    assert "Invalid JSON" in capsys.readouterr().err


def test_invalid_base_exit_code(tmp_path, capsys):
    src = write_json(tmp_path)
    out = tmp_path / "o.nt"
    assert cli.main(["no scheme", "--json", str(src), "--out", str(out)]) == 1
    assert not out.exists()
    assert "Invalid base IRI" in capsys.readouterr().err


def test_missing_input(tmp_path, capsys):
    assert cli.main(["--json", str(tmp_path / "nope.json")]) == 1
    assert "not found" in capsys.readouterr().err


def test_unknown_format_is_usage_error():
    with pytest.raises(SystemExit) as e:
        cli.main(["--format", "csv"])
    assert e.value.code == 2


def test_options_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv(ENV_BASE, "urn:json:")
    monkeypatch.setenv(ENV_INPUT, str(tmp_path / "a.json"))
    monkeypatch.delenv(ENV_OUT, raising=False)
    opts = resolve_options()
    assert opts.base == "urn:json:"
    assert opts.input_path == (tmp_path / "a.json").resolve()
    assert opts.out_path is None
    assert opts.streaming


def test_cli_flag_beats_env(monkeypatch):
    monkeypatch.setenv(ENV_BASE, "urn:env:")
    assert resolve_options(base="http://flag/").base == "http://flag/"


def test_resolve_options_rejects_format():
    with pytest.raises(ValueError):
        resolve_options(fmt="csv")


@pytest.mark.parametrize("text", ['{"1": "a"}', '{"": "a"}'])
def test_xml_unshortenable_predicate_exit_code(tmp_path, capsys, text):
    src = write_json(tmp_path, text)
    code = cli.main(["http://example.org/", "--json", str(src), "--format", "xml", "--out", str(tmp_path / "o.rdf")])
    assert code == 1
    assert "Cannot serialize as xml" in capsys.readouterr().err


def test_numeric_key_still_works_as_ntriples(tmp_path, capsys):
    src = write_json(tmp_path, '{"1": "a"}')
    assert cli.main(["http://example.org/", "--json", str(src)]) == 0
    assert "<http://example.org/#1>" in capsys.readouterr().out


def test_stats_help_mentions_memory_growth():
    text = " ".join(cli.build_parser().format_help().split())
    assert "memory grows with the document size" in text
