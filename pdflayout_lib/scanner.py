# --- pdflayout_lib/scanner.py ---
"""
pdflayout_lib/scanner.py: Contains the FontScanner, a whole-document pass
that estimates the body text size used as the heading-ratio denominator.
"""
import logging
from collections import defaultdict

from .constants import DEFAULT_CONFIG

log_prescan = logging.getLogger("pdflayout.prescan")


class FontScanner:
    """
    Scans every extracted page before any block is classified.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG

    def body_font_size(self, pages):
        """Returns the font size carrying the most (trimmed) characters.

        Sizes are bucketed to one decimal place. On a tie the size seen first
        wins.
        """
        char_counts = defaultdict(int)
        for page in pages:
            for run in page.text_items:
                text = run.text.strip()
                if not text:
                    continue
                char_counts[round(run.font_size, 1)] += len(text)

        body_size, max_count = self.config.default_body_font_size, 0
        for size, count in char_counts.items():
            if count > max_count:
                body_size, max_count = size, count

        if not max_count:
            log_prescan.debug("No text found, using default body size %.1f.", body_size)
        else:
            log_prescan.info(
                "Determined document body font size: %.1f (%d chars)", body_size, max_count
            )
        return body_size
