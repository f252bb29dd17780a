# --- pdflayout_lib/extractor.py ---
"""
pdflayout_lib/extractor.py: The page content extractor boundary.

`PageSource` is the asynchronous interface the import pipeline consumes;
`PDFMinerSource` implements it on top of pdfminer.six. Blocking parser work is
pushed to worker threads so the event loop is never blocked by it.
"""
import asyncio
import logging
import os
import threading
from dataclasses import replace
from io import BytesIO
from numbers import Real

from pdfminer.converter import PDFPageAggregator
from pdfminer.layout import LAParams, LTAnno, LTChar, LTImage, LTTextLine
from pdfminer.pdfdocument import PDFDestinationNotFound, PDFDocument, PDFNoOutlines
from pdfminer.pdfinterp import PDFPageInterpreter, PDFResourceManager
from pdfminer.pdfpage import PDFPage
from pdfminer.pdfparser import PDFParser
from pdfminer.pdftypes import resolve1

from .images import decode_image
from .models import FontStyle, OutlineNode, Page, TextRun

log_extract = logging.getLogger("pdflayout.extract")


class ExtractionError(RuntimeError):
    """A page or the document structure could not be read."""


class PageSource:
    """
    Asynchronous access to a paginated document's positioned content.
    """

    async def page_count(self) -> int:
        raise NotImplementedError

    async def extract_page(self, page_index) -> Page:
        """Returns the content of a page (1-based index)."""
        raise NotImplementedError

    async def get_outline(self):
        """Returns the bookmark tree as a list of OutlineNode, or None."""
        raise NotImplementedError

    async def resolve_destination(self, name):
        """Resolves a named destination to an explicit destination array."""
        raise NotImplementedError

    async def page_index_of(self, page_ref):
        """Returns the 0-based index of a page reference, or None."""
        raise NotImplementedError


def _literal_name(obj):
    name = getattr(obj, "name", obj)
    if isinstance(name, bytes):
        name = name.decode("latin-1")
    return name


def css_color(ncolor):
    """Best-effort CSS colour for a non-stroking colour; None for black."""
    if isinstance(ncolor, Real):
        components = (ncolor,)
    elif isinstance(ncolor, (list, tuple)):
        components = tuple(ncolor)
    else:
        return None
    if not components or not all(isinstance(c, Real) for c in components):
        return None

    if len(components) == 1:
        r = g = b = components[0]
    elif len(components) == 3:
        r, g, b = components
    elif len(components) == 4:
        c, m, y, k = components
        r, g, b = (1 - c) * (1 - k), (1 - m) * (1 - k), (1 - y) * (1 - k)
    else:
        return None
    rgb = tuple(round(max(0.0, min(1.0, float(v))) * 255) for v in (r, g, b))
    if rgb == (0, 0, 0):
        return None
    return "#{:02x}{:02x}{:02x}".format(*rgb)


class PDFMinerSource(PageSource):
    """
    Reads pages, images and bookmarks of a PDF with pdfminer.six.

    The document is parsed once and shared; pages are interpreted one at a
    time under the source's lock.
    Args:
        pdf_file (str | bytes): Path to the PDF, or its raw bytes.
        laparams (LAParams): Layout analysis parameters for pdfminer. The
            default also runs line analysis on text inside figures (form
            XObjects), so that text is not lost.
    """

    def __init__(self, pdf_file, laparams=None):
        if isinstance(pdf_file, (bytes, bytearray)):
            self.pdf_path, self._data = None, bytes(pdf_file)
        else:
            if not os.path.exists(pdf_file):
                raise FileNotFoundError(f"PDF file not found: {pdf_file}")
            self.pdf_path, self._data = pdf_file, None
        self.laparams = laparams or LAParams(all_texts=True)
        self._lock = threading.Lock()
        self._rsrcmgr = PDFResourceManager(caching=True)
        self._fp = None
        self._doc = None
        self._pages = None
        self._page_ids = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        if self._fp:
            self._fp.close()
        self._fp, self._doc, self._pages, self._page_ids = None, None, None, None

    def _document(self):
        """Lazily opens the shared PDFDocument. Callers must hold the lock."""
        if self._doc is None:
            self._fp = open(self.pdf_path, "rb") if self.pdf_path else BytesIO(self._data)
            try:
                self._doc = PDFDocument(PDFParser(self._fp))
            except Exception as e:
                self.close()
                raise ExtractionError(f"Could not open PDF document: {e}") from e
        return self._doc

    def _pdf_pages(self):
        """The document's PDFPage objects, in order. Callers must hold the lock."""
        if self._pages is None:
            self._pages = list(PDFPage.create_pages(self._document()))
        return self._pages

    def _page_id_map(self):
        if self._page_ids is None:
            self._page_ids = {page.pageid: i for i, page in enumerate(self._pdf_pages())}
        return self._page_ids

    # --- PageSource interface ---
    async def page_count(self):
        return await asyncio.to_thread(self._page_count_sync)

    async def extract_page(self, page_index):
        return await asyncio.to_thread(self._extract_page_sync, page_index)

    async def get_outline(self):
        try:
            return await asyncio.to_thread(self._load_outline)
        except Exception as e:
            log_extract.warning("Could not read document outline: %s", e)
            return None

    async def resolve_destination(self, name):
        return await asyncio.to_thread(self._resolve_destination_sync, name)

    async def page_index_of(self, page_ref):
        return await asyncio.to_thread(self._page_index_of_sync, page_ref)

    # --- Blocking implementations ---
    def _page_count_sync(self):
        with self._lock:
            try:
                return len(self._pdf_pages())
            except ExtractionError:
                raise
            except Exception as e:
                raise ExtractionError(f"Could not enumerate pages: {e}") from e

    def _extract_page_sync(self, page_index):
        log_extract.debug("Extracting page %d...", page_index)
        with self._lock:
            try:
                pages = self._pdf_pages()
            except ExtractionError:
                raise
            except Exception as e:
                raise ExtractionError(f"Could not enumerate pages: {e}") from e
            if not 1 <= page_index <= len(pages):
                raise ExtractionError(f"Page {page_index} does not exist.")
            try:
                device = PDFPageAggregator(self._rsrcmgr, laparams=self.laparams)
                PDFPageInterpreter(self._rsrcmgr, device).process_page(pages[page_index - 1])
                layout = device.get_result()
            except Exception as e:
                raise ExtractionError(f"Could not read page {page_index}: {e}") from e
        return self.build_page(layout, page_index)

    def build_page(self, layout, page_index):
        """Converts a pdfminer LTPage into a Page."""
        runs = []
        for line in self._find_elements_by_type(layout, LTTextLine):
            runs.extend(self._runs_from_line(line, layout))
        images = []
        for lt_image in self._find_elements_by_type(layout, LTImage):
            image = decode_image(lt_image)
            if image:
                images.append(image)
        log_extract.info(
            "Page %d: %d text run(s), %d image(s).", page_index, len(runs), len(images)
        )
        return Page(page_index, layout.width, layout.height, runs, images)

    def _find_elements_by_type(self, obj, t):
        """Recursively finds all layout elements of a specific type."""
        e = []
        if isinstance(obj, t):
            e.append(obj)
        if hasattr(obj, "_objs"):
            for child in obj:
                e.extend(self._find_elements_by_type(child, t))
        return e

    def _runs_from_line(self, line, layout):
        """Splits a text line into runs of glyphs sharing font and size.

        Word spaces inserted by pdfminer stay in the text; at a font change
        they close the run that precedes them.
        """
        runs, items, pending, key = [], [], [], None
        for obj in line:
            if isinstance(obj, LTChar):
                obj_key = (obj.fontname, round(obj.size, 2))
                if items and obj_key != key:
                    runs.append(self._make_run(items + pending, layout))
                    items, pending = [], []
                items.extend(pending)
                items.append(obj)
                pending, key = [], obj_key
            elif isinstance(obj, LTAnno) and items and obj.get_text() not in ("\n", ""):
                pending.append(obj)
        if items:
            runs.append(self._make_run(items, layout))
        runs = [run for run in runs if run]
        if runs:
            runs[-1] = replace(runs[-1], has_eol=True)
        return runs

    def _make_run(self, items, layout):
        glyphs = [obj for obj in items if isinstance(obj, LTChar)]
        first, last = glyphs[0], glyphs[-1]
        font_size = first.size or first.height
        if font_size <= 0:
            return None
        graphicstate = getattr(first, "graphicstate", None)
        return TextRun(
            text="".join(obj.get_text() for obj in items),
            x=first.x0 - layout.x0,
            y=layout.y1 - first.matrix[5],
            width=last.x1 - first.x0,
            height=max(g.height for g in glyphs),
            font_size=font_size,
            font_name=first.fontname,
            font_style=FontStyle.from_font_name(first.fontname),
            color=css_color(getattr(graphicstate, "ncolor", None)),
        )

    def _load_outline(self):
        with self._lock:
            doc = self._document()
            try:
                entries = list(doc.get_outlines())
            except PDFNoOutlines:
                log_extract.debug("Document has no outline.")
                return None

        roots, stack = [], []
        for level, title, dest, action, _ in entries:
            if isinstance(title, bytes):
                title = title.decode("latin-1")
            node = OutlineNode(title, self._normalize_dest(dest, action))
            while stack and stack[-1][0] >= level:
                stack.pop()
            (stack[-1][1].children if stack else roots).append(node)
            stack.append((level, node))
        log_extract.info("Read %d outline entries.", len(entries))
        return roots

    def _normalize_dest(self, dest, action=None):
        """Reduces a /Dest or GoTo action to a name, an array, or None."""
        if dest is None and action is not None:
            action = resolve1(action)
            if isinstance(action, dict) and _literal_name(action.get("S")) == "GoTo":
                dest = action.get("D")
        dest = resolve1(dest)
        if isinstance(dest, dict):
            dest = resolve1(dest.get("D"))
        if isinstance(dest, (list, tuple)):
            return [dest[0], *(resolve1(v) for v in dest[1:])] if dest else []
        if dest is None:
            return None
        return _literal_name(dest) if not isinstance(dest, str) else dest

    def _resolve_destination_sync(self, name):
        with self._lock:
            doc = self._document()
            for key in (name.encode("latin-1", errors="ignore"), name):
                try:
                    dest = doc.get_dest(key)
                except (PDFDestinationNotFound, KeyError, TypeError):
                    continue
                normalized = self._normalize_dest(dest)
                if isinstance(normalized, list):
                    return normalized
        return None

    def _page_index_of_sync(self, page_ref):
        objid = getattr(page_ref, "objid", None)
        if objid is None:
            # Some producers write a plain page number instead of a reference.
            if isinstance(page_ref, int) and not isinstance(page_ref, bool):
                return page_ref
            return None
        with self._lock:
            return self._page_id_map().get(objid)
