"""Read-only HTML view of the document.

The page renders the markdown in the browser with markdown-it.
"""

from __future__ import annotations

from jinja2 import Environment

_ENVIRONMENT = Environment(autoescape=True)

_VIEW_TEMPLATE = _ENVIRONMENT.from_string(
    """<!DOCTYPE html>
<html>
    <head>
        <meta http-equiv="Content-Type" content="text/html; charset=utf-8" />
        <script type="text/javascript" src="https://cdnjs.cloudflare.com/ajax/libs/markdown-it/8.4.0/markdown-it.min.js"></script>
        <title>{{ title }}</title>
    </head>
    <body>
        <div id="view" style="width: 600px; padding: 0 10px"></div>
        <pre id="markdown" hidden>{{ body }}</pre>
        <script type="text/javascript">
            var markdown = document.getElementById("markdown");
            var view = document.getElementById("view");
            view.innerHTML = (window.markdownit()).render(markdown.textContent);
        </script>
    </body>
</html>
"""
)


def render_view(content: bytes, title: str) -> str:
    """Embed document content into the HTML view.

    Args:
        content: Raw document bytes, decoded as UTF-8.
        title: Page title, usually the object key.

    Returns:
        Complete HTML page.
    """
    text = content.decode("utf-8", errors="replace")
    return _VIEW_TEMPLATE.render(title=title, body=text)
