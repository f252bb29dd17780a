# --- pdflayout_lib/classifier.py ---
"""
pdflayout_lib/classifier.py: Contains the BlockClassifier, which decides
whether a block is a heading (and which level) or a paragraph.
"""
import logging

from .constants import DEFAULT_CONFIG

log_classify = logging.getLogger("pdflayout.classify")


class BlockClassifier:
    """
    Classifies blocks from the outline first and from font sizes otherwise.

    Font sizes are only consulted when the document has no outline at all:
    a document with bookmarks is trusted to name all of its headings.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG

    def classify(self, block, page_index, body_font_size, outline_index):
        """Sets `block.kind` (and `block.level`) and returns the block."""
        text = block.text.strip()

        level = outline_index.match_position(
            page_index, block.first_y, self.config.outline_y_tolerance
        )
        if level is None:
            level = outline_index.match_title(text)
        if level is not None:
            log_classify.debug("Outline heading h%d: %r", level, text[:50])
            block.set_heading(level)
            return block

        if outline_index.is_empty:
            level = self.heading_level_by_size(block.font_size, body_font_size)
            if level and 0 < len(text) < self.config.heading_max_chars:
                log_classify.debug("Font-size heading h%d: %r", level, text[:50])
                block.set_heading(level)
                return block

        block.set_paragraph()
        return block

    def heading_level_by_size(self, font_size, body_font_size):
        """Maps a font size to a heading level through the ratio ladder."""
        ratio = font_size / body_font_size if body_font_size else 0
        if ratio < self.config.heading_min_ratio:
            return None
        for level, threshold in self.config.heading_levels:
            if ratio >= threshold:
                return level
        return self.config.heading_levels[-1][0]
