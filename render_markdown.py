"""
Markdown to HTML, capturing the document title on the way.

The title is the text of the first heading (any level) in document order.
It is picked up by a tree processor while Python-Markdown renders, so each
note is parsed exactly once.
"""

from __future__ import annotations

import html
from pathlib import Path
import re
from typing import Iterator, List, Tuple
import xml.etree.ElementTree as etree

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE

MARKDOWN_EXTENSIONS = ["extra", "fenced_code", "tables"]

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}

ENTITY_RE = re.compile(r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z0-9]+);")


class TitleTreeprocessor(Treeprocessor):
    """Store the text of the first heading as ``md.title``."""

    def run(self, root: etree.Element) -> None:
        found = False
        parts: List[str] = []
        for el in root.iter():
            if el.tag in HEADING_TAGS:
                found = True
                parts.extend(self._text(el))
                break
        self.md.title = "".join(parts) if found else ""

    def _text(self, el: etree.Element) -> Iterator[str]:
        """Plain text of an element and its descendants, in document order."""
        if el.text:
            yield self._plain(el.text, escaped=el.tag == "code")
        for child in el:
            yield from self._text(child)
            if child.tail:
                yield self._plain(child.tail)

    def _plain(self, text: str, escaped: bool = False) -> str:
        # code span text is stored HTML-escaped
        if escaped:
            text = html.unescape(text)
        return HTML_PLACEHOLDER_RE.sub(self._unstash, text)

    def _unstash(self, m: re.Match[str]) -> str:
        """Decode a stashed entity; stashed tags contribute no text."""
        index = int(m.group(1))
        stash = self.md.htmlStash.rawHtmlBlocks
        raw = stash[index] if index < len(stash) else ""
        if isinstance(raw, str) and ENTITY_RE.fullmatch(raw):
            return html.unescape(raw)
        return ""


class TitleExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        md.registerExtension(self)
        self.md = md
        md.title = ""
        # after inline patterns (20) and unescaping (0), so heading text is final
        md.treeprocessors.register(TitleTreeprocessor(md), "title", -10)

    def reset(self) -> None:
        self.md.title = ""


def render_markdown(md_text: str) -> Tuple[str, str]:
    """Convert markdown to HTML and return (body_html, title)."""
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS + [TitleExtension()])
    body_html = md.convert(md_text)
    return body_html, getattr(md, "title", "")


def render_file(md_path: Path) -> Tuple[str, str]:
    """Read a note as strict UTF-8 and render it.

    Raises UnicodeDecodeError for text that isn't valid UTF-8.
    """
    return render_markdown(md_path.read_bytes().decode("utf-8"))
