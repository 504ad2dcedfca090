"""Wraps rendered note HTML into a self-contained, measurable document."""

import html

ROOT_ELEMENT_ID = "notepile-root"

DOCUMENT_CSS = (
    "html,body{height:auto !important;min-height:0 !important;margin:0;padding:0;overflow-x:hidden;}"
    f"#{ROOT_ELEMENT_ID}{{box-sizing:border-box;padding:8px 12px 8px 12px;display:block;width:100%;}}"
    "body{font-family:sans-serif;font-size:12px;color:#111;background:transparent;}"
    "img{max-width:100%;height:auto;display:block;margin:0;} p{margin:12px 0;}"
    "pre, code { white-space: pre-wrap; word-wrap: break-word; overflow-wrap: break-word; }"
    "table{ max-width:100%; table-layout: fixed; } ul,ol{margin:4px 0;padding-left:24px;}"
)


def _base_tag(base_url: str | None) -> str:
    if not base_url:
        return ""
    if not base_url.endswith("/"):
        base_url += "/"
    return f'<base href="{html.escape(base_url, quote=True)}"/>'


def _viewport_tag(width: int | None) -> str:
    if width is None:
        return ""
    return f'<meta name="viewport" content="width={int(width)}"/>'


def wrap_document(fragment: str, base_url: str | None = None, width: int | None = None) -> str:
    """
    Build the complete HTML document loaded into a note's surface.

    The fragment is placed verbatim inside ``#notepile-root`` so the injected
    measurement script can read the content's intrinsic height instead of the
    viewport's.

    Args:
        fragment: Rendered note HTML (passed through unchanged)
        base_url: Directory URL relative attachment links resolve against
        width: Target layout width in pixels, if known

    Returns:
        Document string
    """
    head = (
        '<meta charset="utf-8"/>'
        + _viewport_tag(width)
        + _base_tag(base_url)
        + f"<style>{DOCUMENT_CSS}</style>"
    )
    return (
        f"<!DOCTYPE html><html><head>{head}</head>"
        f'<body><div id="{ROOT_ELEMENT_ID}">{fragment}</div></body></html>'
    )


def plain_text_block(text: str) -> str:
    """Fallback fragment for a body the markup renderer could not handle."""
    return f"<pre>{html.escape(text or '')}</pre>"


def image_tag(file_name: str, width: int | None = None, folder: str = "attachments") -> str:
    """
    Attachment image reference as stored in note bodies.

    An explicit width is kept as an attribute so a chosen display width
    survives save and reload.
    """
    src = html.escape(f"{folder}/{file_name}", quote=True)
    alt = html.escape(file_name, quote=True)
    if width is None:
        return f'<img src="{src}" alt="{alt}" />'
    return f'<img src="{src}" alt="{alt}" width="{int(width)}" />'
