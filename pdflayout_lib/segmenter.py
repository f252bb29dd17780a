# --- pdflayout_lib/segmenter.py ---
"""
pdflayout_lib/segmenter.py: Contains the ContentSegmenter, which merges the
lines of one column into paragraph or heading candidates.
"""
import logging

from .constants import DEFAULT_CONFIG
from .models import Block

log_structure = logging.getLogger("pdflayout.structure")


class ContentSegmenter:
    """
    Segments a column of lines into unclassified Blocks.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG

    def segment_column(self, lines, body_font_size):
        """Groups consecutive lines into blocks.

        A new block starts on a vertical gap wider than the previous line's
        expected line height, or on a font-size jump measured against the
        document's body size.
        """
        if not lines:
            return []
        cfg = self.config
        blocks, current = [], [lines[0]]
        for prev, line in zip(lines, lines[1:]):
            prev_size = prev.font_size
            gap = line.y - prev.last_y
            line_threshold = prev_size * cfg.line_height_factor
            is_gap_break = gap > line_threshold * cfg.block_gap_factor
            is_size_break = (
                abs(line.font_size - prev_size) > body_font_size * cfg.font_jump_ratio
            )
            if is_gap_break or is_size_break:
                log_structure.debug(
                    "Block break before %r (gap=%.2f, size %.2f -> %.2f)",
                    line.text[:30],
                    gap,
                    prev_size,
                    line.font_size,
                )
                blocks.append(Block(current))
                current = [line]
            else:
                current.append(line)
        blocks.append(Block(current))
        return blocks
