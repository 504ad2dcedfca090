from markdown_it import MarkdownIt

from ..core.errors import MarkupRenderError
from ..core.ports import MarkupRenderer


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


class MarkdownRenderer(MarkupRenderer):
    """
    Note bodies -> HTML.

    Every single newline is a hard break (notes are typed, not reflowed);
    blank lines still separate paragraphs. Raw HTML is kept so sized
    ``<img ... width="n" />`` attachment tags survive.
    """

    def __init__(self) -> None:
        self._md = MarkdownIt(
            "commonmark",
            {"html": True, "breaks": True, "linkify": False, "typographer": False},
        ).enable("table").enable("strikethrough")

    def render(self, markup: str) -> str:
        try:
            return self._md.render(normalize_newlines(markup or ""))
        except Exception as e:
            raise MarkupRenderError(str(e)) from e
