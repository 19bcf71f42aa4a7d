#!/usr/bin/env python3
"""Citation trend report runner."""

import argparse
import logging
import sys
import time
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from citetrend.core.report_spec import ReportSpec, load_report_spec
from citetrend.exporters import export_all
from citetrend.fetch.sources import fetch_citation_data
from citetrend.series.pipeline import build_citation_table

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("report")


# ── Report ───────────────────────────────────────────────────────────


def run_report(
    spec_path: str,
    output_dir: str | None = None,
    current_year: int | None = None,
    limit: int | None = None,
) -> dict:
    """Fetch, build and export a citation trend report."""
    t_start = time.time()

    logger.info("Loading report spec: %s", spec_path)
    spec = load_report_spec(spec_path)
    logger.info("Report: %s (%s, %s)", spec.title, spec.researcher.id, spec.source)

    if output_dir is None:
        output_dir = str(PROJECT_ROOT / "reports" / spec.researcher.id)
    if current_year is None:
        current_year = spec.current_year
    if limit is None:
        limit = spec.max_publications

    try:
        publications, histories = _stage_fetch(spec, limit)
        rows = _stage_build(publications, histories, current_year)
        paths = _stage_export(rows, spec, output_dir)
    except Exception as exc:
        logger.error("Report failed: %s", exc, exc_info=True)
        raise
    finally:
        logger.info("=" * 60)
        logger.info("REPORT FINISHED in %.1fs", time.time() - t_start)

    return paths


# ── Stage Implementations ────────────────────────────────────────────


def _stage_fetch(spec: ReportSpec, limit: int | None):
    t = time.time()
    logger.info("=" * 60)
    logger.info("STAGE: FETCH")

    publications, histories = fetch_citation_data(
        spec.researcher.id,
        spec.source,
        limit=limit,
        contact_email=spec.contact_email,
    )
    logger.info("Fetch complete in %.1fs: %d publications", time.time() - t, len(publications))
    return publications, histories


def _stage_build(publications, histories, current_year: int | None):
    t = time.time()
    logger.info("=" * 60)
    logger.info("STAGE: BUILD")

    rows = build_citation_table(publications, histories, current_year)
    logger.info("Build complete in %.1fs: %d rows", time.time() - t, len(rows))
    return rows


def _stage_export(rows, spec: ReportSpec, output_dir: str) -> dict:
    t = time.time()
    logger.info("=" * 60)
    logger.info("STAGE: EXPORT")

    paths = export_all(rows, spec, output_dir)
    logger.info("Export complete in %.1fs", time.time() - t)
    for name, path in paths.items():
        logger.info("  %s: %s", name, path)
    return paths


# ── CLI ──────────────────────────────────────────────────────────────


def main():
    parser = argparse.ArgumentParser(description="Build a citation trend report for one researcher")
    parser.add_argument("--spec", required=True, help="Path to Report Spec YAML file")
    parser.add_argument("--output-dir", default=None, help="Directory for exported files")
    parser.add_argument(
        "--current-year",
        type=int,
        default=None,
        help="Last year of the citation series (default: spec value or this year)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Limit number of publications to fetch (for testing)",
    )
    args = parser.parse_args()

    run_report(args.spec, args.output_dir, current_year=args.current_year, limit=args.limit)


if __name__ == "__main__":
    main()
