"""Content Converter: feed item HTML -> Markdown text for Notion paragraphs.

Walks the BeautifulSoup tree and emits inline Markdown for headings,
emphasis, links, images, code, lists and quotes. Pure and deterministic.
"""
import re

from bs4 import BeautifulSoup, NavigableString, ParserRejectedMarkup, Tag
from bs4.element import Comment, Doctype, ProcessingInstruction

from rss_notion.errors import ConversionError

_DROP_TAGS = {"script", "style", "head", "noscript", "template"}
_BLOCK_TAGS = {
    "p", "div", "section", "article", "header", "footer", "aside", "main",
    "figure", "figcaption", "table", "tr", "dl", "dt", "dd", "nav",
}
_SKIP_STRINGS = (Comment, Doctype, ProcessingInstruction)


def _squash(text: str) -> str:
    return re.sub(r"\s+", " ", text)


def _wrap(inner: str, marker: str) -> str:
    """Wrap inner text in an emphasis marker, keeping surrounding spaces outside."""
    stripped = inner.strip()
    if not stripped:
        return inner
    lead = " " if inner[:1].isspace() else ""
    trail = " " if inner[-1:].isspace() else ""
    return f"{lead}{marker}{stripped}{marker}{trail}"


def _block(inner: str) -> str:
    inner = inner.strip()
    return f"\n\n{inner}\n\n" if inner else ""


def _children(node: Tag) -> str:
    return "".join(_render(child) for child in node.children)


def _render_list(node: Tag) -> str:
    ordered = node.name == "ol"
    lines = []
    index = 1
    for child in node.children:
        if not isinstance(child, Tag) or child.name != "li":
            continue
        body = _children(child).strip()
        body = re.sub(r"\n{2,}", "\n", body).replace("\n", "\n  ")
        bullet = f"{index}." if ordered else "-"
        lines.append(f"{bullet} {body}")
        index += 1
    return "\n\n" + "\n".join(lines) + "\n\n" if lines else ""


def _render(node) -> str:
    if isinstance(node, _SKIP_STRINGS):
        return ""
    if isinstance(node, NavigableString):
        return _squash(str(node))
    if not isinstance(node, Tag):
        return ""

    name = node.name
    if name in _DROP_TAGS:
        return ""
    if name in {"h1", "h2", "h3", "h4", "h5", "h6"}:
        text = _squash(_children(node)).strip()
        return f"\n\n{'#' * int(name[1])} {text}\n\n" if text else ""
    if name in {"strong", "b"}:
        return _wrap(_children(node), "**")
    if name in {"em", "i"}:
        return _wrap(_children(node), "_")
    if name in {"del", "s", "strike"}:
        return _wrap(_children(node), "~~")
    if name == "a":
        text = _children(node).strip()
        href = (node.get("href") or "").strip()
        if not href:
            return text
        return f"[{text or href}]({href})"
    if name == "img":
        src = (node.get("src") or "").strip()
        return f"![{(node.get('alt') or '').strip()}]({src})" if src else ""
    if name == "br":
        return "\n"
    if name == "hr":
        return "\n\n* * *\n\n"
    if name == "pre":
        code = node.get_text().strip("\n")
        return f"\n\n```\n{code}\n```\n\n"
    if name == "code":
        text = node.get_text()
        return f"`{text}`" if text else ""
    if name in {"ul", "ol"}:
        return _render_list(node)
    if name == "blockquote":
        inner = _children(node).strip()
        if not inner:
            return ""
        inner = re.sub(r"\n{3,}", "\n\n", inner)
        quoted = "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
        return f"\n\n{quoted}\n\n"
    if name in _BLOCK_TAGS:
        return _block(_children(node))
    return _children(node)


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment to Markdown; empty input gives ""."""
    if not isinstance(html, str):
        raise ConversionError(f"expected HTML text, got {type(html).__name__}")
    if not html.strip():
        return ""

    try:
        soup = BeautifulSoup(html, "html.parser")
        text = _render(soup)
    except ParserRejectedMarkup as e:
        raise ConversionError(f"error converting HTML to markdown: {e}") from e
    except RecursionError as e:
        raise ConversionError("error converting HTML to markdown: markup nested too deeply") from e

    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
