# --- pdflayout_lib/constants.py ---
"""
pdflayout_lib/constants.py: Heuristic thresholds used by the layout stages.
"""
from dataclasses import dataclass, replace

# --- HEADING LADDER ---
# (level, minimum font-size ratio against the body size), checked top-down.
HEADING_LEVELS = (
    (1, 1.8),
    (2, 1.5),
    (3, 1.3),
    (4, 1.15),
)


@dataclass(frozen=True)
class LayoutConfig:
    """Every tunable of the reconstruction pipeline, passed to each stage."""

    # Line grouping
    y_tolerance: float = 2.0

    # Column detection
    column_gap_ratio: float = 0.05
    column_min_runs: int = 6
    column_min_line_starts: int = 4
    column_min_cluster_lines: int = 2

    # Block grouping
    line_height_factor: float = 1.5
    block_gap_factor: float = 1.3
    font_jump_ratio: float = 0.15

    # Rendering
    space_gap_factor: float = 0.3

    # Heading classification
    heading_min_ratio: float = 1.15
    heading_levels: tuple = HEADING_LEVELS
    heading_max_chars: int = 200
    outline_y_tolerance: float = 15.0
    max_outline_level: int = 4

    default_body_font_size: float = 12.0

    # Extraction
    max_concurrent_pages: int = 4

    def replace(self, **overrides):
        """Returns a copy with some thresholds overridden."""
        return replace(self, **overrides)


DEFAULT_CONFIG = LayoutConfig()
