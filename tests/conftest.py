import pytest

from pdflayout_lib.constants import DEFAULT_CONFIG
from pdflayout_lib.extractor import ExtractionError, PageSource
from pdflayout_lib.models import FontStyle, Page, TextRun


def make_run(text, x=0.0, y=0.0, size=12.0, width=None, bold=False, italic=False, **kw):
    """Builds a TextRun; width defaults to half an em per character."""
    if width is None:
        width = len(text) * size * 0.5
    return TextRun(
        text=text,
        x=x,
        y=y,
        width=width,
        height=size,
        font_size=size,
        font_style=FontStyle(is_bold=bold, is_italic=italic),
        **kw,
    )


class PageRef:
    """Stands in for an indirect page reference inside a destination array."""

    def __init__(self, objid):
        self.objid = objid

    def __repr__(self):
        return f"PageRef({self.objid})"


class FakeSource(PageSource):
    """An in-memory PageSource.

    `pages` maps 1-based page numbers to Page objects, `page_refs` maps
    PageRef objids to 0-based page indexes and `named_dests` maps names to
    explicit destination arrays. Any of `failing_pages`, `failing_names`
    raise on access.
    """

    def __init__(
        self,
        pages,
        outline=None,
        named_dests=None,
        page_refs=None,
        failing_pages=(),
        failing_names=(),
    ):
        self.pages = pages
        self.outline = outline
        self.named_dests = named_dests or {}
        self.page_refs = page_refs or {}
        self.failing_pages = set(failing_pages)
        self.failing_names = set(failing_names)
        self.extracted = []

    async def page_count(self):
        return len(self.pages)

    async def extract_page(self, page_index):
        if page_index in self.failing_pages:
            raise ExtractionError(f"Could not read page {page_index}")
        self.extracted.append(page_index)
        return self.pages[page_index]

    async def get_outline(self):
        return self.outline

    async def resolve_destination(self, name):
        if name in self.failing_names:
            raise RuntimeError(f"Broken name tree entry {name}")
        return self.named_dests.get(name)

    async def page_index_of(self, page_ref):
        return self.page_refs.get(getattr(page_ref, "objid", None))


@pytest.fixture
def config():
    return DEFAULT_CONFIG


@pytest.fixture
def title_page():
    """A page with one large title line followed by a two-line paragraph."""
    return Page(
        page_index=1,
        width=600,
        height=800,
        text_items=[
            make_run("Title", x=72, y=100, size=24),
            make_run("Body text line one.", x=72, y=140, size=12),
            make_run("Body text line two.", x=72, y=155, size=12),
        ],
    )
