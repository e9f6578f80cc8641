"""
HTML Renderer for the command catalog
Converts Markdown to a styled standalone HTML page
"""

from __future__ import annotations

import markdown
from typing import Optional
from ..config import settings


# Colour variables per theme, consumed by PAGE_CSS
PALETTES = {
    "light": {"bg": "#ffffff", "fg": "#24292f", "link": "#0969da", "rule": "#d0d7de", "code-bg": "#f6f8fa"},
    "dark": {"bg": "#0d1117", "fg": "#e6edf3", "link": "#2f81f7", "rule": "#30363d", "code-bg": "#161b22"},
}

PAGE_CSS = """
body { margin: 0; background: var(--bg); color: var(--fg); }
.markdown-body {
    font: var(--font-size)/1.6 -apple-system, 'Segoe UI', Helvetica, Arial, sans-serif;
    max-width: var(--max-width);
    margin: 0 auto;
    padding: 16px;
}
h2, h3 { border-bottom: 1px solid var(--rule); padding-bottom: 4px; }
a { color: var(--link); }
code, pre { background: var(--code-bg); font-family: Menlo, Consolas, monospace; }
pre { padding: 12px; border-radius: 6px; overflow-x: auto; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid var(--rule); padding: 6px 10px; text-align: left; }
th { background: var(--code-bg); }
"""


class HtmlRenderer:
    """HTML renderer with configurable CSS themes"""

    def __init__(
        self,
        theme: Optional[str] = None,
        font_size: Optional[str] = None,
        max_width: Optional[str] = None
    ):
        # Use settings defaults or override with parameters
        self.theme = theme or settings.css_theme
        if self.theme not in PALETTES:
            self.theme = "light"
        self.font_size = font_size or settings.html_font_size
        self.max_width = max_width or settings.html_max_width

        self.md = markdown.Markdown(
            extensions=[
                'tables',           # Table support
                'fenced_code',      # ```code blocks
                'nl2br',            # Newlines to <br>
            ]
        )

    def render(self, markdown_text: str, title: str = "Commands") -> str:
        """Convert Markdown to a complete HTML document"""
        self.md.reset()
        html_content = self.md.convert(markdown_text)
        return self._build_html_document(html_content, self._get_complete_css(), title)

    def _build_html_document(self, content: str, css: str, title: str) -> str:
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self._escape_html(title)}</title>
    <style>
{css}
    </style>
</head>
<body>
    <article class="markdown-body">
        {content}
    </article>
</body>
</html>"""

    def _escape_html(self, text: str) -> str:
        """Escape HTML entities"""
        return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")

    def _get_complete_css(self) -> str:
        palette = PALETTES[self.theme]
        variables = "\n".join(f"    --{name}: {value};" for name, value in palette.items())
        return f""":root {{
    --font-size: {self.font_size};
    --max-width: {self.max_width};
{variables}
}}
{PAGE_CSS}"""
