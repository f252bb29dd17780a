# --- pdflayout_lib/analyzer.py ---
"""
pdflayout_lib/analyzer.py: Contains the PageLayoutAnalyzer, which groups a
page's text runs into visual lines and splits them into reading columns.
"""
import logging

from .constants import DEFAULT_CONFIG
from .models import Line

log_layout = logging.getLogger("pdflayout.layout")


def cluster_values(values, threshold):
    """Sequentially clusters sorted values.

    A value joins the last cluster when it lies within `threshold` of that
    cluster's running centroid. Returns a list of (center, count) tuples.
    """
    if not values:
        return []
    clusters, centers = [[values[0]]], [values[0]]
    for value in values[1:]:
        if value - centers[-1] <= threshold:
            clusters[-1].append(value)
            centers[-1] = sum(clusters[-1]) / len(clusters[-1])
        else:
            clusters.append([value])
            centers.append(value)
    return [(c, len(members)) for c, members in zip(centers, clusters)]


class PageLayoutAnalyzer:
    """
    Analyzes the physical layout of a page: visual lines and columns.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG

    def group_into_lines(self, runs):
        """Groups runs into lines by vertical proximity.

        A run joins the current line when its `y` is within the tolerance of
        the `y` of the run that opened the line. The anchor is not averaged,
        so a long line on a slanted baseline may be cut in two.
        """
        if not runs:
            return []
        ordered = sorted(runs, key=lambda r: (r.y, r.x))
        lines, current = [], [ordered[0]]
        anchor_y = ordered[0].y
        for run in ordered[1:]:
            if abs(run.y - anchor_y) <= self.config.y_tolerance:
                current.append(run)
            else:
                lines.append(Line(current))
                current, anchor_y = [run], run.y
        lines.append(Line(current))
        return lines

    def split_columns(self, runs, page_width):
        """Splits a page's runs into left-to-right column groups.

        Columns are detected from the left edges of the page's lines, then
        every original run (blank ones included) is assigned to a column.
        """
        cfg = self.config
        runs = list(runs)
        if not runs:
            return [runs]

        valid = [run for run in runs if not run.is_blank]
        if len(valid) < cfg.column_min_runs:
            return [runs]

        line_starts = [line.left for line in self.group_into_lines(valid)]
        if len(line_starts) < cfg.column_min_line_starts:
            return [runs]

        clusters = cluster_values(sorted(line_starts), page_width * cfg.column_gap_ratio)
        significant = sorted(
            (c for c in clusters if c[1] >= cfg.column_min_cluster_lines),
            key=lambda c: c[0],
        )
        if len(significant) < 2:
            log_layout.debug(
                "Column check: %d cluster(s), %d significant. Decision: 1 column.",
                len(clusters),
                len(significant),
            )
            return [runs]

        boundaries = [
            (significant[i][0] + significant[i + 1][0]) / 2
            for i in range(len(significant) - 1)
        ]
        columns = [[] for _ in significant]
        for run in runs:
            col_idx = 0
            for b_idx, boundary in enumerate(boundaries):
                if run.x >= boundary:
                    col_idx = b_idx + 1
            columns[col_idx].append(run)

        non_empty = [col for col in columns if col]
        log_layout.debug(
            "Column check: centers at %s. Decision: %d columns.",
            ", ".join(f"{c[0]:.1f}" for c in significant),
            len(non_empty),
        )
        return non_empty
