# --- pdflayout_lib/models.py ---
"""
pdflayout_lib/models.py: Data models for the positioned content of a PDF page
and for the lines and blocks rebuilt from it.
"""
from dataclasses import dataclass, field
from enum import Enum

BOLD_MARKERS = ("bold", "heavy", "black")
ITALIC_MARKERS = ("italic", "oblique")


# --- GEOMETRY PRIMITIVES (AS REPORTED BY THE EXTRACTOR) ---
@dataclass(frozen=True)
class FontStyle:
    """Bold/italic flags guessed from a font name."""

    is_bold: bool = False
    is_italic: bool = False

    @classmethod
    def from_font_name(cls, font_name, italic_hint=False):
        """Derives the style from substrings of the (case-insensitive) font name."""
        name = (font_name or "").lower()
        is_bold = any(marker in name for marker in BOLD_MARKERS)
        is_italic = italic_hint or any(marker in name for marker in ITALIC_MARKERS)
        return cls(is_bold=is_bold, is_italic=is_italic)


@dataclass(frozen=True)
class TextRun:
    """One contiguous span of text drawn with a single font at one position.

    Coordinates are in viewport space: origin at the page's top-left corner,
    `y` growing downwards.
    """

    text: str
    x: float
    y: float
    width: float
    height: float
    font_size: float
    font_name: str = ""
    font_style: FontStyle = field(default_factory=FontStyle)
    has_eol: bool = False
    color: str | None = None

    def __post_init__(self):
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")
        if not self.text and not self.has_eol:
            raise ValueError("Empty text is only allowed on end-of-line markers.")

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class RasterImage:
    """A decoded embedded image, ready to be inlined."""

    data_url: str
    name: str = ""


@dataclass(frozen=True)
class Page:
    """Everything extracted from one page. `page_index` is 1-based."""

    page_index: int
    width: float
    height: float
    text_items: tuple = ()
    images: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "text_items", tuple(self.text_items))
        object.__setattr__(self, "images", tuple(self.images))


# --- DERIVED STRUCTURES (LIVE FOR ONE IMPORT ONLY) ---
def weighted_font_size(runs, default=12.0):
    """Text-length-weighted mean font size; empty runs weigh as one character."""
    total_len, weighted = 0, 0.0
    for run in runs:
        length = len(run.text) or 1
        total_len += length
        weighted += run.font_size * length
    return weighted / total_len if total_len > 0 else default


class Line:
    """A visual row of runs, sorted left to right."""

    def __init__(self, runs):
        self.runs = sorted(runs, key=lambda r: r.x)

    def __len__(self):
        return len(self.runs)

    def __iter__(self):
        return iter(self.runs)

    @property
    def y(self) -> float:
        """Vertical position of the line's first (leftmost) run."""
        return self.runs[0].y

    @property
    def last_y(self) -> float:
        return self.runs[-1].y

    @property
    def left(self) -> float:
        return min(run.x for run in self.runs)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def font_size(self) -> float:
        return weighted_font_size(self.runs)

    def __repr__(self):
        return f"Line(y={self.y:.1f}, text={self.text[:40]!r})"


class BlockKind(Enum):
    """What a block is rendered as."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"


class Block:
    """A run of consecutive lines treated as one paragraph or heading."""

    def __init__(self, lines, kind=None, level=None):
        self.lines: list[Line] = lines
        self.kind: BlockKind | None = kind
        self.level: int | None = level

    @property
    def text(self) -> str:
        """All runs of all lines, concatenated without separators."""
        return "".join(line.text for line in self.lines)

    @property
    def font_size(self) -> float:
        return weighted_font_size(run for line in self.lines for run in line)

    @property
    def first_y(self) -> float:
        return self.lines[0].y

    @property
    def is_heading(self) -> bool:
        return self.kind is BlockKind.HEADING

    def set_heading(self, level):
        self.kind, self.level = BlockKind.HEADING, level

    def set_paragraph(self):
        self.kind, self.level = BlockKind.PARAGRAPH, None

    def __repr__(self):
        kind = self.kind.value if self.kind else "unclassified"
        if self.is_heading:
            kind = f"h{self.level}"
        return f"Block({kind}, {len(self.lines)} lines, text={self.text[:40]!r})"


# --- DOCUMENT OUTLINE ---
class OutlineNode:
    """One bookmark entry.

    `dest` is None, a symbolic destination name (str) or an explicit
    destination array ([page_ref, /Mode, ...]).
    """

    def __init__(self, title, dest=None, children=None):
        self.title = title or ""
        self.dest = dest
        self.children: list[OutlineNode] = children or []

    def __repr__(self):
        return f"OutlineNode({self.title!r}, children={len(self.children)})"


@dataclass(frozen=True)
class PositionTarget:
    """A bookmark resolved to a spot on a page (0-based page, viewport y)."""

    page_index: int
    y: float
    level: int


@dataclass(frozen=True)
class TitleTarget:
    """A bookmark that could only be resolved to its title text."""

    title: str
    level: int
