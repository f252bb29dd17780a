# --- pdflayout_lib/reconstructor.py ---
"""
pdflayout_lib/reconstructor.py: Contains the DocumentReconstructor, which runs
the per-page layout stages and assembles the final HTML.
"""
import logging

from .analyzer import PageLayoutAnalyzer
from .classifier import BlockClassifier
from .constants import DEFAULT_CONFIG
from .renderer import HTMLRenderer
from .segmenter import ContentSegmenter

log_reconstruct = logging.getLogger("pdflayout.structure")


class DocumentReconstructor:
    """
    Walks the extracted pages to build the document's HTML fragment.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG
        self.analyzer = PageLayoutAnalyzer(self.config)
        self.segmenter = ContentSegmenter(self.config)
        self.classifier = BlockClassifier(self.config)
        self.renderer = HTMLRenderer(self.config)
        self.stats = {"pages": 0, "columns": 0, "blocks": 0, "headings": 0, "images": 0}

    def build_html(self, pages, body_font_size, outline_index):
        """Renders every page in order and joins the fragments."""
        logging.getLogger("pdflayout").info(
            "--- Reconstructing Document from %d Page(s) ---", len(pages)
        )
        parts = []
        for page in pages:
            parts.extend(self.build_page(page, body_font_size, outline_index))
        return "\n".join(parts)

    def build_page(self, page, body_font_size, outline_index):
        """Returns the HTML fragments of one page: text blocks, then images."""
        page_idx = page.page_index - 1
        columns = self.analyzer.split_columns(page.text_items, page.width)
        log_reconstruct.debug(
            "Page %d: %d column(s), %d run(s), %d image(s)",
            page.page_index,
            len(columns),
            len(page.text_items),
            len(page.images),
        )
        parts = []
        for column in columns:
            lines = self.analyzer.group_into_lines(column)
            blocks = self.segmenter.segment_column(lines, body_font_size)
            for block in blocks:
                self.classifier.classify(block, page_idx, body_font_size, outline_index)
            parts.extend(self.renderer.render_blocks(blocks))
            self.stats["blocks"] += len(blocks)
            self.stats["headings"] += sum(1 for b in blocks if b.is_heading)
        parts.extend(self.renderer.render_image(image) for image in page.images)

        self.stats["pages"] += 1
        self.stats["columns"] += len(columns)
        self.stats["images"] += len(page.images)
        return parts
