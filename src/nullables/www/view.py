"""Overall HTML template and error pages for the www site."""

from __future__ import annotations

from html import escape

from nullables.http.response import HttpResponse


def page_template(title: str, body: str) -> str:
    """Wrap a page body in the site's HTML document.

    ``title`` is escaped; ``body`` is inserted as HTML.

    Args:
        title: Page title.
        body: HTML body content.

    Returns:
        Complete HTML document.
    """
    return f"""
<html lang="en">
<head>
    <title>{escape(title)}</title>
</head>
<body>{body}</body>
</html>
"""


def error_page(status: int, message: str) -> HttpResponse:
    """Build an HTML error response.

    Args:
        status: HTTP status code.
        message: Error message shown in the title and body.

    Returns:
        HTML response with the given status.

    Examples:
        >>> error_page(404, "not found").status
        404
    """
    title = f"{status}: {message}"
    body = f"<p>{escape(message)}</p>"
    return HttpResponse.create_html_response(status=status, body=page_template(title, body))


__all__ = [
    "error_page",
    "page_template",
]
