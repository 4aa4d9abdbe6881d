"""Markdown + LaTeX rendering helpers for question and explanation text.

Question sources deliver plain markdown that may contain ``$...$`` math.
The server converts it to HTML fragments and leaves the math delimiters in
place so that a client-side MathJax instance can typeset them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return ""
        return self._markdown.render(sanitized)

    def render_options(self, options: dict[str, str]) -> dict[str, str]:
        """Render every option text, keeping the option keys."""

        return {key: self.render_fragment(text) for key, text in options.items()}


# MarkdownIt is safe for concurrent read-only renders, so the server threads
# share this instance.
renderer = MarkdownMathRenderer()
