"""Citation trend line charts (matplotlib)."""

import logging
from pathlib import Path
from typing import Literal, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd

logger = logging.getLogger(__name__)

_AXIS_LABELS = {
    "year": "Year",
    "age": "Years since publication",
}
_VALUE_LABELS = {
    "cumulative_cites": "Cumulative citations",
    "cites": "Citations per year",
}
_MAX_LABEL = 45


# ── Data Prep ────────────────────────────────────────────────────────


def select_publications(frame: pd.DataFrame, citation_threshold: int = 0) -> pd.DataFrame:
    """Rows of publications whose total citations exceed the threshold."""
    return frame[frame["total_citations"] > citation_threshold]


def smooth(frame: pd.DataFrame, column: str, window: int) -> pd.Series:
    """Centered rolling mean of a column, computed per publication."""
    ordered = frame.sort_values(["publication_id", "year"])
    smoothed = ordered.groupby("publication_id")[column].transform(
        lambda s: s.rolling(window, center=True, min_periods=1).mean()
    )
    return smoothed.reindex(frame.index)


# ── Rendering ────────────────────────────────────────────────────────


def plot_citation_trends(
    frame: pd.DataFrame,
    output_path: str,
    axis: Literal["year", "age"] = "year",
    value: Literal["cumulative_cites", "cites"] = "cumulative_cites",
    citation_threshold: int = 0,
    smoothing_window: Optional[int] = None,
    title: Optional[str] = None,
) -> str | None:
    """Draw one line per publication and save the chart as an image.

    Returns the output path, or None when no publication passes the filter.
    """
    data = select_publications(frame, citation_threshold)
    if data.empty:
        logger.warning(
            "No publications above %d citations; skipping %s chart",
            citation_threshold,
            axis,
        )
        return None

    data = data.sort_values(["publication_id", axis])
    y = data[value]
    if smoothing_window and smoothing_window > 1:
        y = smooth(data, value, smoothing_window)

    fig, ax = plt.subplots(figsize=(10, 6))
    for _, group in data.groupby("publication_id", sort=False):
        ax.plot(group[axis], y.loc[group.index], marker="o", markersize=3, label=_label(group))

    ax.set_xlabel(_AXIS_LABELS[axis])
    ax.set_ylabel(_VALUE_LABELS[value])
    ax.set_title(title or f"{_VALUE_LABELS[value]} by {_AXIS_LABELS[axis].lower()}")
    ax.grid(True, axis="y", alpha=0.7, color="gray", linestyle="--")
    ax.set_axisbelow(True)
    ax.legend(fontsize="small", loc="upper left", bbox_to_anchor=(1.01, 1.0))
    fig.tight_layout()

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

    logger.info(
        "Chart (%s vs %s, %d publications) saved to %s",
        value,
        axis,
        data["publication_id"].nunique(),
        output_path,
    )
    return output_path


def _label(group: pd.DataFrame) -> str:
    title = str(group["title"].iloc[0])
    if len(title) > _MAX_LABEL:
        title = title[: _MAX_LABEL - 3] + "..."
    return f"{title} ({group['total_citations'].iloc[0]})"
