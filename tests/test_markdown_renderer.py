from timed_quiz.constants.ui_constants import QUESTION_TEXT_MISSING
from timed_quiz.core.markdown_renderer import renderer
from timed_quiz.core.models import Question


def _render(text):
    return renderer.render_question(Question(text=text, submit_url="http://quiz.test/answer/1"))


def test_markdown_is_rendered():
    html = _render("Which planet is the **Red Planet**? ~~Pluto~~")
    assert "<strong>Red Planet</strong>" in html
    assert "<s>Pluto</s>" in html


def test_raw_html_is_escaped():
    html = _render("<script>alert(1)</script> What is 2 + 2?")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_images_are_not_rendered():
    assert "<img" not in _render("![logo](http://tracker.test/pixel.png) Pick one")


def test_blank_text_shows_placeholder():
    assert QUESTION_TEXT_MISSING in _render("   ")
