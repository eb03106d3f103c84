"""Turn fetched content into an HTTP response."""

from fastapi import Response
from fastapi.responses import HTMLResponse, PlainTextResponse

from gateway.content.fetcher import FetchedContent
from gateway.core.config import ResponseMode

OCTET_STREAM = "application/octet-stream"


def media_type_of(content_type: str | None) -> str | None:
    """Return the bare media type of a Content-Type header value.

    Parameters are dropped and the result is lower-cased, so
    ``"Text/HTML; charset=utf-8"`` becomes ``"text/html"``.
    """
    if not content_type:
        return None
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type or None


def format_content(
    content: FetchedContent, mode: ResponseMode = ResponseMode.CONTENT_TYPE
) -> Response:
    """Select a response shape for ``content``.

    In ``html`` mode every body is served as HTML. Otherwise ``text/html``
    and ``text/plain`` get text responses, ``image/*`` keeps its original
    header and everything else falls back to ``application/octet-stream``.
    """
    if mode is ResponseMode.HTML:
        return HTMLResponse(content=content.body)

    media_type = media_type_of(content.content_type)
    if media_type == "text/html":
        return HTMLResponse(content=content.body)
    if media_type == "text/plain":
        return PlainTextResponse(content=content.body)
    if media_type is not None and media_type.startswith("image/"):
        return Response(content=content.body, media_type=content.content_type)
    return Response(content=content.body, media_type=OCTET_STREAM)
