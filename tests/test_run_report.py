"""Tests for the report runner script (fetch mocked, build and export real)."""

import csv
import importlib.util
import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from citetrend.fetch.models import CitationObservation, Publication

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "run_report.py"


@pytest.fixture(scope="module")
def runner():
    spec = importlib.util.spec_from_file_location("run_report", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def spec_path(tmp_path):
    path = tmp_path / "report.yaml"
    with open(path, "w") as f:
        yaml.safe_dump({
            "title": "Runner Test",
            "researcher": {"id": "oMjrLWcAAAAJ"},
            "source": "scholar",
            "current_year": 2020,
            "max_publications": 2,
            "charts": {"citation_threshold": 0},
        }, f)
    return str(path)


def _fetched():
    pubs = [
        Publication(id="a", title="Paper A", publication_year=2017, total_citations=5),
        Publication(id="b", title="Paper B", publication_year=2021, total_citations=1),
    ]
    histories = {"a": [CitationObservation(publication_id="a", year=2019, cites=5)], "b": []}
    return pubs, histories


# ── Config Defaults ──────────────────────────────────────────────────


def test_spec_values_used(runner, spec_path, tmp_path):
    out = tmp_path / "out"
    with patch.object(runner, "fetch_citation_data", return_value=_fetched()) as fetch:
        paths = runner.run_report(spec_path, str(out))

    fetch.assert_called_once_with("oMjrLWcAAAAJ", "scholar", limit=2, contact_email=None)

    with open(paths["table_csv"]) as f:
        records = list(csv.DictReader(f))
    # Paper B is dated after 2020 and contributes no rows
    assert [(r["publication_id"], r["year"]) for r in records] == [
        ("a", "2017"), ("a", "2018"), ("a", "2019"), ("a", "2020"),
    ]


def test_arguments_override_spec(runner, spec_path, tmp_path):
    with patch.object(runner, "fetch_citation_data", return_value=_fetched()) as fetch:
        paths = runner.run_report(spec_path, str(tmp_path / "out"), current_year=2022, limit=1)

    assert fetch.call_args.kwargs["limit"] == 1
    with open(paths["manifest"]) as f:
        manifest = json.load(f)
    # a: 2017-2022, b: 2021-2022
    assert manifest["rows"] == 8


def test_fetch_failure_propagates(runner, spec_path, tmp_path):
    with patch.object(runner, "fetch_citation_data", side_effect=ConnectionError("blocked")):
        with pytest.raises(ConnectionError):
            runner.run_report(spec_path, str(tmp_path / "out"))


# ── CLI ──────────────────────────────────────────────────────────────


def test_main_parses_arguments(runner, spec_path, tmp_path):
    argv = [
        "run_report.py", "--spec", spec_path,
        "--output-dir", str(tmp_path / "cli"), "--current-year", "2021",
    ]
    with patch("sys.argv", argv), patch.object(runner, "run_report") as run:
        runner.main()

    run.assert_called_once_with(spec_path, str(tmp_path / "cli"), current_year=2021, limit=None)
