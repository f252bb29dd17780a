"""
pdflayout_lib: Rebuilds headings, paragraphs, reading order and inline images
from the positioned text runs of a PDF and renders them as an HTML fragment.
"""
from .api import DocumentImporter, import_document, import_pdf, parse_page_selection
from .constants import DEFAULT_CONFIG, LayoutConfig
from .extractor import ExtractionError, PageSource, PDFMinerSource

__all__ = [
    "DocumentImporter",
    "import_document",
    "import_pdf",
    "parse_page_selection",
    "DEFAULT_CONFIG",
    "LayoutConfig",
    "ExtractionError",
    "PageSource",
    "PDFMinerSource",
]
