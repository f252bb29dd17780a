# --- pdflayout_lib/renderer.py ---
"""
pdflayout_lib/renderer.py: Contains the HTMLRenderer, which turns classified
blocks and page images into the HTML fragment handed to the editor.
"""
import logging

from .constants import DEFAULT_CONFIG

log_render = logging.getLogger("pdflayout.render")


def escape_html(text):
    """Escapes the characters that are unsafe in element content and attributes."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


class HTMLRenderer:
    """
    Renders Blocks as <p>/<h1>-<h4> elements and images as inline <img> tags.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG

    def render_blocks(self, blocks):
        """Renders blocks in order, dropping the ones with no visible text."""
        parts = [self.render_block(block) for block in blocks]
        return [html for html in parts if html]

    def render_block(self, block):
        lines = [self.render_line(line) for line in block.lines]
        lines = [line for line in lines if line.strip()]
        if not lines:
            return ""
        if block.is_heading:
            tag = f"h{block.level}"
            return f"<{tag}>{' '.join(lines)}</{tag}>"
        return f"<p>{'<br>'.join(lines)}</p>"

    def render_line(self, line):
        """Concatenates a line's runs, restoring word gaps lost by extraction."""
        parts, runs = [], line.runs
        for i, run in enumerate(runs):
            if not run.text:
                continue
            if i > 0:
                prev = runs[i - 1]
                gap = run.x - (prev.x + prev.width)
                if gap > run.font_size * self.config.space_gap_factor:
                    parts.append(" ")
            parts.append(self.render_run(run))
        return "".join(parts)

    def render_run(self, run):
        html = escape_html(run.text)
        style = run.font_style
        if style.is_bold and style.is_italic:
            html = f"<strong><em>{html}</em></strong>"
        elif style.is_bold:
            html = f"<strong>{html}</strong>"
        elif style.is_italic:
            html = f"<em>{html}</em>"
        if run.color:
            html = f'<span style="color: {escape_html(run.color)}">{html}</span>'
        return html

    def render_image(self, image):
        log_render.debug("Inlining image '%s'.", image.name)
        return f'<p><img src="{escape_html(image.data_url)}"/></p>'
