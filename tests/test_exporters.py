"""Tests for export modules: table CSV/Excel, summary, charts, manifest."""

import csv
import json
from pathlib import Path

import openpyxl
import pytest

from citetrend.core.report_spec import ReportSpec
from citetrend.exporters import export_all
from citetrend.exporters.charts import plot_citation_trends, select_publications, smooth
from citetrend.exporters.citation_table import export_table_csv, export_table_excel
from citetrend.exporters.summary import export_summary_csv, summarize_publications
from citetrend.fetch.models import CitationObservation, Publication
from citetrend.series.pipeline import build_citation_table, citation_frame


@pytest.fixture()
def rows():
    publications = [
        Publication(id="a", title="Highly Cited Paper", publication_year=2015, total_citations=30),
        Publication(id="b", title="Modest Paper", publication_year=2017, total_citations=4),
    ]
    histories = {
        "a": [
            CitationObservation(publication_id="a", year=2016, cites=10),
            CitationObservation(publication_id="a", year=2018, cites=20),
        ],
        "b": [
            CitationObservation(publication_id="b", year=2019, cites=4),
            CitationObservation(publication_id="b", year=2022, cites=1),
        ],
    }
    return build_citation_table(publications, histories, current_year=2020)


@pytest.fixture()
def spec():
    return ReportSpec.model_validate({
        "title": "Test Report",
        "researcher": {"id": "abc"},
        "charts": {"citation_threshold": 5, "smoothing_window": 3},
    })


# ── Citation Table ───────────────────────────────────────────────────


def test_table_csv(rows, tmp_path):
    out = str(tmp_path / "table.csv")
    export_table_csv(rows, out)

    with open(out) as f:
        records = list(csv.DictReader(f))
    assert len(records) == len(rows)
    assert records[0]["publication_id"] == "a"
    assert records[0]["cumulative_cites"] == "0"
    assert {"year", "age", "cites", "title", "total_citations"} <= set(records[0])


def test_table_excel(rows, tmp_path):
    out = str(tmp_path / "table.xlsx")
    export_table_excel(rows, out)

    wb = openpyxl.load_workbook(out)
    assert wb.sheetnames == ["Citation Table", "Publications"]
    assert wb["Citation Table"].max_row == len(rows) + 1
    assert wb["Publications"].max_row == 3
    assert wb["Citation Table"]["A1"].font.bold


# ── Summary ──────────────────────────────────────────────────────────


def test_summary_values(rows):
    summaries = {s["publication_id"]: s for s in summarize_publications(rows)}
    a = summaries["a"]
    assert a["observed_citations"] == 30
    assert a["years_tracked"] == 6
    assert a["peak_year"] == 2018
    assert a["peak_cites"] == 20
    assert a["zero_filled_years"] == 4
    assert a["out_of_range_years"] == 0

    b = summaries["b"]
    assert b["out_of_range_years"] == 1
    assert b["years_tracked"] == 5


def test_summary_no_citations():
    pub = Publication(id="z", title="Uncited", publication_year=2019)
    summary = summarize_publications(build_citation_table([pub], {}, current_year=2020))[0]
    assert summary["peak_year"] is None
    assert summary["observed_citations"] == 0


def test_summary_csv(rows, tmp_path):
    out = str(tmp_path / "summary.csv")
    export_summary_csv(rows, out)
    with open(out) as f:
        records = list(csv.DictReader(f))
    assert [r["publication_id"] for r in records] == ["a", "b"]


# ── Charts ───────────────────────────────────────────────────────────


def test_select_publications_strictly_exceeds(rows):
    frame = citation_frame(rows)
    assert set(select_publications(frame, 4)["publication_id"]) == {"a"}
    assert set(select_publications(frame, 3)["publication_id"]) == {"a", "b"}


def test_smooth_stays_within_publication(rows):
    frame = citation_frame(rows)
    smoothed = smooth(frame, "cites", 3)
    a_first = frame[(frame["publication_id"] == "a") & (frame["year"] == 2015)].index[0]
    # Window at 2015 covers 2015-2016 of the same publication only
    assert smoothed[a_first] == pytest.approx(5.0)


@pytest.mark.parametrize("axis", ["year", "age"])
def test_chart_written(rows, tmp_path, axis):
    out = str(tmp_path / f"chart_{axis}.png")
    path = plot_citation_trends(citation_frame(rows), out, axis=axis, smoothing_window=2)
    assert path == out
    assert Path(out).stat().st_size > 0


def test_chart_skipped_when_nothing_passes(rows, tmp_path):
    out = str(tmp_path / "none.png")
    assert plot_citation_trends(citation_frame(rows), out, citation_threshold=1000) is None
    assert not Path(out).exists()


def test_chart_empty_frame(tmp_path):
    assert plot_citation_trends(citation_frame([]), str(tmp_path / "x.png")) is None


# ── Export All ───────────────────────────────────────────────────────


def test_export_all(rows, spec, tmp_path):
    paths = export_all(rows, spec, str(tmp_path / "exports"))
    assert set(paths) == {
        "table_csv", "table_xlsx", "summary_csv", "chart_year", "chart_age", "manifest",
    }
    for path in paths.values():
        assert Path(path).exists()

    with open(paths["manifest"]) as f:
        manifest = json.load(f)
    assert manifest["config_hash"] == spec.config_hash()
    assert manifest["publications"] == 2
    assert manifest["rows"] == len(rows)
