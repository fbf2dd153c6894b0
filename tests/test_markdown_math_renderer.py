from __future__ import annotations

from quiz_panel.core.markdown_math_renderer import MarkdownMathRenderer


def test_render_question_marks_selected_option():
    html = MarkdownMathRenderer().render_question(
        "Which is **bold**?",
        ("$x^2$", "plain", "*em*", "last"),
        selected_index=2,
    )
    assert "<strong>bold</strong>" in html
    assert '<li class="option selected" data-letter="C"><em>em</em></li>' in html
    assert '<li class="option" data-letter="A">$x^2$</li>' in html


def test_raw_html_is_escaped():
    html = MarkdownMathRenderer().render_fragment("<script>alert(1)</script>")
    assert "<script>" not in html


def test_empty_fragment_has_placeholder():
    assert "No content provided" in MarkdownMathRenderer().render_fragment("   ")


def test_wrap_with_mathjax_loads_mathjax_and_escapes_title():
    page = MarkdownMathRenderer().wrap_with_mathjax("<p>body</p>", title="A & B", font_size=18)
    assert "mathjax" in page.lower()
    assert "<title>A &amp; B</title>" in page
    assert "font-size: 18pt" in page
    assert "<p>body</p>" in page
