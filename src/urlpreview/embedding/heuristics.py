"""Detect static markup that only becomes a page after scripts run."""

from __future__ import annotations

import lxml.html
from lxml import etree

_MOUNT_IDS = ("root", "app", "__next", "__nuxt", "svelte")
_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


def visible_text(doc: lxml.html.HtmlElement) -> str:
    """Return whitespace-collapsed body text with non-rendered elements dropped.

    Mutates ``doc``: script, style, noscript and template elements are removed.
    """

    body = doc.find("body")
    root = body if body is not None else doc
    for element in list(root.iter(*_INVISIBLE_TAGS)):
        element.drop_tree()
    return " ".join(root.text_content().split())


def needs_script_rendering(html: str, *, min_text_chars: int = 200) -> bool:
    """Return True when ``html`` is likely an empty shell filled in by JavaScript."""

    if not html.strip():
        return True
    try:
        doc = lxml.html.document_fromstring(html)
    except (etree.ParserError, ValueError):
        return True

    if not doc.xpath("//script"):
        return False

    for mount_id in _MOUNT_IDS:
        for node in doc.xpath("//body//*[@id=$mount_id]", mount_id=mount_id):
            if len(node) == 0 and not (node.text or "").strip():
                return True

    return len(visible_text(doc)) < min_text_chars
