# --- pdflayout_lib/api.py ---
"""
pdflayout_lib/api.py: Public entry points of the PDF import pipeline.
"""
import asyncio
import logging
import time

from .constants import DEFAULT_CONFIG
from .extractor import PDFMinerSource
from .outline import OutlineIndex, OutlineResolver
from .reconstructor import DocumentReconstructor
from .scanner import FontScanner

log = logging.getLogger("pdflayout.api")


def parse_page_selection(pages_str: str) -> set | None:
    """Parses a page selection string (e.g., '1,3,5-7') into a set of integers.

    Returns None for 'all'. Raises ValueError on a malformed selection.
    """
    if not pages_str or pages_str.strip().lower() == "all":
        return None
    pages = set()
    try:
        for p in pages_str.split(","):
            part = p.strip()
            if "-" in part:
                s, e = map(int, part.split("-"))
                pages.update(range(s, e + 1))
            else:
                pages.add(int(part))
    except ValueError:
        raise ValueError(f"Invalid page selection format: {pages_str}") from None
    if not pages or min(pages) < 1:
        raise ValueError(f"Invalid page selection format: {pages_str}")
    return pages


class DocumentImporter:
    """
    Runs the whole import for one document.

    Pages are extracted concurrently (bounded by `max_concurrent_pages`); the
    body font size is measured only once every page is in, and only then are
    blocks grouped, classified and rendered.
    Args:
        source (PageSource): Where pages, images and the outline come from.
        config (LayoutConfig): Heuristic thresholds; defaults to DEFAULT_CONFIG.
    """

    def __init__(self, source, config=None):
        self.source = source
        self.config = config or DEFAULT_CONFIG
        self.stats = {}

    async def run(self, pages=None):
        """Imports the document (or the selected 1-based pages) as HTML."""
        start = time.monotonic()
        total = await self.source.page_count()
        page_numbers = [n for n in range(1, total + 1) if not pages or n in pages]
        if pages and len(page_numbers) < len(pages):
            log.warning(
                "Ignoring pages outside the document (1-%d): %s",
                total,
                sorted(n for n in pages if n > total),
            )

        logging.getLogger("pdflayout").info(
            "--- Extracting %d of %d Page(s) ---", len(page_numbers), total
        )
        extracted = await self._extract_pages(page_numbers)
        outline = await self.source.get_outline()
        extract_done = time.monotonic()

        body_font_size = FontScanner(self.config).body_font_size(extracted)
        targets = await OutlineResolver(self.source, self.config).resolve(outline, extracted)

        reconstructor = DocumentReconstructor(self.config)
        html = reconstructor.build_html(extracted, body_font_size, OutlineIndex(targets))

        self.stats = {
            **reconstructor.stats,
            "page_count": total,
            "body_font_size": body_font_size,
            "outline_targets": len(targets),
            "extract_duration": extract_done - start,
            "total_duration": time.monotonic() - start,
        }
        log.info(
            "Import finished: %d page(s), %d block(s), %d heading(s), %d image(s).",
            self.stats["pages"],
            self.stats["blocks"],
            self.stats["headings"],
            self.stats["images"],
        )
        return html

    async def _extract_pages(self, page_numbers):
        semaphore = asyncio.Semaphore(max(1, self.config.max_concurrent_pages))

        async def extract(page_number):
            async with semaphore:
                return await self.source.extract_page(page_number)

        return await asyncio.gather(*(extract(n) for n in page_numbers))


async def import_document(source, config=None, pages=None):
    """Imports a document from any PageSource and returns the HTML fragment."""
    return await DocumentImporter(source, config).run(pages)


def import_pdf(pdf_file, pages_str: str = "all", config=None) -> str:
    """
    Converts a PDF (path or raw bytes) into an HTML fragment.
    """
    pages = parse_page_selection(pages_str)
    with PDFMinerSource(pdf_file) as source:
        return asyncio.run(import_document(source, config, pages))
