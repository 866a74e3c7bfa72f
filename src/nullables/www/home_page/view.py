"""Home page HTML."""

from __future__ import annotations

from html import escape

from nullables.http.response import HttpResponse
from nullables.www.view import page_template

TITLE = "ROT-13 Converter"


def home_page(text: str | None = None) -> HttpResponse:
    """Render the home page form.

    Args:
        text: Text to pre-fill the form with (typically the transformed text).

    Returns:
        HTML response with status 200.
    """
    value = "" if text is None else escape(text, quote=True)
    body = f"""
<p>Enter text to translate using ROT-13:</p>
<form action="/" method="post">
    <input type="text" name="text" required="required" autofocus="autofocus" value="{value}" />
    <input type="submit" value="Transform" />
</form>
"""
    return HttpResponse.create_html_response(status=200, body=page_template(TITLE, body))


__all__ = [
    "home_page",
]
