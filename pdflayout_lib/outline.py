# --- pdflayout_lib/outline.py ---
"""
pdflayout_lib/outline.py: Resolves the document's bookmark tree into heading
targets and provides the lookup the BlockClassifier consults.
"""
import logging
from collections import defaultdict
from numbers import Real

from .constants import DEFAULT_CONFIG
from .models import PositionTarget, TitleTarget

log_outline = logging.getLogger("pdflayout.outline")

# Index of the "top" coordinate inside an explicit destination array, by view mode.
DEST_TOP_INDEX = {"XYZ": 3, "FitH": 2, "FitBH": 2, "FitR": 5}


def _view_mode(dest):
    """Returns the bare name of a destination's view mode (e.g. 'XYZ')."""
    mode = getattr(dest[1], "name", dest[1])
    if isinstance(mode, bytes):
        mode = mode.decode("latin-1")
    return str(mode).lstrip("/")


def dest_top(dest):
    """Returns the PDF-space y of an explicit destination, or None if absent.

    Raises ValueError when the coordinate slot holds something other than a
    number or null.
    """
    index = DEST_TOP_INDEX.get(_view_mode(dest))
    if index is None or index >= len(dest) or dest[index] is None:
        return None
    value = dest[index]
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"Non-numeric destination coordinate: {value!r}")
    return float(value)


class OutlineIndex:
    """Read-only lookup over resolved outline targets."""

    def __init__(self, targets=()):
        self.positions = defaultdict(list)
        self.titles = []
        for target in targets:
            if isinstance(target, PositionTarget):
                self.positions[target.page_index].append(target)
            else:
                self.titles.append(target)

    def __len__(self):
        return sum(len(p) for p in self.positions.values()) + len(self.titles)

    @property
    def is_empty(self) -> bool:
        return not self.positions and not self.titles

    def match_position(self, page_index, y, tolerance):
        """Returns the level of a same-page target within `tolerance` of `y`."""
        for target in self.positions.get(page_index, ()):
            if abs(target.y - y) <= tolerance:
                return target.level
        return None

    def match_title(self, text):
        """Returns the level of a title target contained in `text` or containing it."""
        text = text.strip()
        if not text:
            return None
        for target in self.titles:
            if target.title in text or text in target.title:
                return target.level
        return None


class OutlineResolver:
    """
    Walks a bookmark tree and resolves every entry to a heading target.
    """

    def __init__(self, source, config=None):
        self.source = source
        self.config = config or DEFAULT_CONFIG

    async def resolve(self, outline, pages):
        """Resolves the whole tree; `pages` are the already extracted pages."""
        if not outline:
            log_outline.info("No outline found, headings will be inferred from font sizes.")
            return []
        pages_by_index = {page.page_index - 1: page for page in pages}
        targets = await self._walk(outline, 1, pages_by_index)
        num_positions = sum(1 for t in targets if isinstance(t, PositionTarget))
        log_outline.info(
            "Resolved %d outline targets (%d by position, %d by title).",
            len(targets),
            num_positions,
            len(targets) - num_positions,
        )
        return targets

    async def _walk(self, nodes, depth, pages_by_index):
        """Pre-order walk; returns the targets of this subtree."""
        level = min(depth, self.config.max_outline_level)
        targets = []
        for node in nodes:
            target = await self._resolve_node(node, level, pages_by_index)
            if target:
                targets.append(target)
            if node.children:
                targets.extend(await self._walk(node.children, depth + 1, pages_by_index))
        return targets

    async def _resolve_node(self, node, level, pages_by_index):
        """Resolves one node, falling back to its title on any failure."""
        try:
            dest = node.dest
            if isinstance(dest, str):
                dest = await self.source.resolve_destination(dest)
                if dest is None:
                    log_outline.debug("Named destination %r not found.", node.dest)
            if dest is not None:
                target = await self._resolve_position(dest, level, pages_by_index)
                if target:
                    log_outline.debug(
                        "'%s' -> page %d, y=%.1f (h%d)",
                        node.title,
                        target.page_index,
                        target.y,
                        level,
                    )
                    return target
        except ValueError as e:
            log_outline.debug("Malformed destination for '%s': %s", node.title, e)
        except Exception as e:
            log_outline.warning("Could not resolve outline entry '%s': %s", node.title, e)
        return self._title_fallback(node, level)

    async def _resolve_position(self, dest, level, pages_by_index):
        if not isinstance(dest, (list, tuple)) or len(dest) < 2:
            raise ValueError(f"Unexpected destination {dest!r}")
        page_index = await self.source.page_index_of(dest[0])
        if page_index is None or page_index not in pages_by_index:
            log_outline.debug("Destination page %r is not available.", dest[0])
            return None
        y = dest_top(dest)
        page = pages_by_index[page_index]
        viewport_y = page.height - y if y is not None else 0.0
        return PositionTarget(page_index, viewport_y, level)

    def _title_fallback(self, node, level):
        title = node.title.strip()
        if not title:
            return None
        log_outline.debug("'%s' -> title fallback (h%d)", title, level)
        return TitleTarget(title, level)
