"""Export convenience function."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from citetrend.core.report_spec import ReportSpec
from citetrend.exporters.charts import plot_citation_trends
from citetrend.exporters.citation_table import export_table_csv, export_table_excel
from citetrend.exporters.summary import export_summary_csv
from citetrend.series.models import DenseCitationRow
from citetrend.series.pipeline import citation_frame

logger = logging.getLogger(__name__)


def export_all(
    rows: Sequence[DenseCitationRow],
    spec: ReportSpec,
    output_dir: str,
) -> dict:
    """Run all exports and return dict of file paths created."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = {}

    table_csv_path = str(out / "citation_table.csv")
    export_table_csv(rows, table_csv_path)
    paths["table_csv"] = table_csv_path

    table_xlsx_path = str(out / "citation_table.xlsx")
    export_table_excel(rows, table_xlsx_path)
    paths["table_xlsx"] = table_xlsx_path

    summary_path = str(out / "publication_summary.csv")
    export_summary_csv(rows, summary_path)
    paths["summary_csv"] = summary_path

    frame = citation_frame(rows)
    charts = spec.charts
    for axis in ("year", "age"):
        chart_path = plot_citation_trends(
            frame,
            str(out / f"citations_by_{axis}.png"),
            axis=axis,
            value=charts.value,
            citation_threshold=charts.citation_threshold,
            smoothing_window=charts.smoothing_window,
            title=f"{spec.title}: citations by {axis}",
        )
        if chart_path:
            paths[f"chart_{axis}"] = chart_path

    manifest_path = str(out / "report_manifest.json")
    manifest = {
        "title": spec.title,
        "researcher_id": spec.researcher.id,
        "source": spec.source,
        "config_hash": spec.config_hash(),
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "publications": len({r.publication_id for r in rows}),
        "rows": len(rows),
        "files": dict(paths),
    }
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)
    paths["manifest"] = manifest_path

    logger.info("All exports written to %s", output_dir)
    return paths
