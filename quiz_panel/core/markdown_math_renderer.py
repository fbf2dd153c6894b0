"""Markdown + LaTeX rendering for question prompts and options.

The desktop attempt view (QWebEngineView) and the browser page render the same
HTML fragment; MathJax typesets the ``$...$`` math on the client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape
from typing import Sequence

from markdown_it import MarkdownIt

_MATHJAX_SCRIPT = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
_OPTION_LETTERS = ("A", "B", "C", "D")


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Raw HTML stays disabled so quiz files cannot inject markup.
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_question(
        self,
        question_text: str,
        options: Sequence[str],
        selected_index: int | None = None,
    ) -> str:
        """Render the prompt followed by lettered options; the selection is bolded."""
        parts = [self.render_fragment(question_text), '<ol class="options" type="A">']
        for idx, option in enumerate(options):
            css_class = "option selected" if idx == selected_index else "option"
            body = self._markdown.renderInline(option.strip() or "(empty)")
            parts.append(f'<li class="{css_class}" data-letter="{_OPTION_LETTERS[idx]}">{body}</li>')
        parts.append("</ol>")
        return "\n".join(parts)

    def wrap_with_mathjax(self, body_html: str, title: str = "QuizPanel", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{escape(title)}</title>
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; font-size: {font_size}pt; }}
      .option {{ padding: 0.25rem 0; }}
      .option.selected {{ font-weight: bold; color: #1e88e5; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }} }};
    </script>
    <script defer src="{_MATHJAX_SCRIPT}"></script>
  </head>
  <body>
    {body_html}
  </body>
</html>"""


renderer = MarkdownMathRenderer()
