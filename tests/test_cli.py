"""
Tests for the cflagsdb command line.
"""

import json

import pytest
from typer.testing import CliRunner

from cflagsdb.main import app

pytestmark = pytest.mark.integration

runner = CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def db_arg(project):
    return ["--db", str(project / "flags.db")]


def _record(project, db_arg, files, flags):
    args = ["record", *db_arg, "--dir", str(project)]
    for f in files:
        args += ["-F", f]
    return runner.invoke(app, args + ["--", *flags])


def test_record_then_query_json(project, db_arg):
    result = _record(project, db_arg, ["main.c", "sub/util.c"], ["-O2", "-Wall"])
    assert result.exit_code == 0

    result = runner.invoke(app, ["query", str(project), "--json", *db_arg])
    assert result.exit_code == 0

    data = json.loads(result.stdout)
    assert sorted(item["file"] for item in data) == [
        str(project / "main.c"),
        str(project / "sub" / "util.c"),
    ]
    assert {item["flags"] for item in data} == {"-O2 -Wall"}
    assert {item["directory"] for item in data} == {str(project)}


def test_query_first_stops_after_one(project, db_arg):
    _record(project, db_arg, ["a.c", "b.c", "c.c"], ["-g"])

    result = runner.invoke(app, ["query", "*", "--first", "--json", *db_arg])

    assert result.exit_code == 0
    assert len(json.loads(result.stdout)) == 1


def test_query_plain_output(project, db_arg):
    _record(project, db_arg, ["a.c"], ["-DFOO"])

    result = runner.invoke(app, ["query", "*", *db_arg])

    assert result.exit_code == 0
    assert "a.c" in result.stdout
    assert "-DFOO" in result.stdout


def test_query_no_match(project, db_arg):
    _record(project, db_arg, ["a.c"], ["-g"])

    result = runner.invoke(app, ["query", "/nowhere/*", "--json", *db_arg])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_lookup(project, db_arg):
    _record(project, db_arg, ["lib/x.c"], ["-fPIC", "-O3"])

    result = runner.invoke(app, ["lookup", "lib/x.c", "--json", *db_arg])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["flags"] == "-fPIC -O3"


def test_lookup_unknown_file(project, db_arg):
    _record(project, db_arg, ["a.c"], ["-g"])

    result = runner.invoke(app, ["lookup", "other.c", *db_arg])

    assert result.exit_code == 1


def test_stats_json(project, db_arg):
    _record(project, db_arg, ["a.c", "b.c"], ["-g"])

    result = runner.invoke(app, ["stats", "--json", *db_arg])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["total_records"] == 2
    assert data["total_directories"] == 1


def test_unavailable_database_exits_1(project):
    result = runner.invoke(app, ["query", "*", "--db", str(project / "missing" / "x.db")])

    assert result.exit_code == 1


def test_default_database_location(project):
    result = runner.invoke(app, ["record", "-F", "a.c", "--", "-O1"])
    assert result.exit_code == 0

    assert (project / ".cflagsdb" / "cflags.db").exists()
