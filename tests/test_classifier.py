"""
Slide classifier tests

Every slide maps to exactly one render path: title, section, columns,
image or content.
"""

import pytest

from termdown.lib.classifier import (
    ClassificationError,
    SlideKind,
    columns_present,
    heading_text,
    image_text_split,
    slide_classify,
)
from termdown.models import Slide


def kind_of(content, **kwargs):
    return slide_classify(Slide(number=1, content=content, **kwargs))


class TestHeadings:
    """Test title and section slides"""

    def test_title(self):
        assert kind_of("# Hello") == SlideKind.TITLE
        assert heading_text("# Hello") == "Hello"

    def test_section(self):
        assert kind_of("## World") == SlideKind.SECTION
        assert heading_text("## World") == "World"

    def test_surrounding_whitespace(self):
        assert kind_of("\n\n# Hello\n\n") == SlideKind.TITLE

    def test_header_slide_is_content(self):
        """### only introduces a header on a content slide"""
        assert kind_of("### Agenda") == SlideKind.CONTENT
        assert kind_of("### Agenda\n* one") == SlideKind.CONTENT

    def test_heading_with_text_is_content(self):
        assert kind_of("# Title\nsome words") == SlideKind.CONTENT

    def test_two_heading_lines_are_an_error(self):
        """A heading slide must hold exactly one heading line"""
        slide = Slide(number=3, content="# Title\n## Subtitle", line_number=12)
        with pytest.raises(ClassificationError) as excinfo:
            slide_classify(slide)
        message = str(excinfo.value)
        assert "slide 3" in message
        assert "line 12" in message

    def test_blank_slide_is_content(self):
        assert kind_of("", is_blank=True) == SlideKind.CONTENT


class TestColumnsAndImages:
    """Test column and image slides"""

    def test_columns(self):
        assert kind_of("left\n|||\nright") == SlideKind.COLUMNS
        assert columns_present("a\n  |||  \nb")

    def test_separator_inside_code(self):
        assert kind_of("```\n|||\n```") == SlideKind.CONTENT

    def test_columns_before_image(self):
        assert kind_of("![a](a.png) text\n|||\nright") == SlideKind.COLUMNS

    def test_image_with_text(self):
        assert kind_of("Some text\n![a](a.png)") == SlideKind.IMAGE

    def test_image_only_is_content(self):
        assert kind_of("![a](a.png)") == SlideKind.CONTENT

    def test_image_inside_code(self):
        assert kind_of("text\n```\n![a](a.png)\n```") == SlideKind.CONTENT

    def test_plain_content(self):
        assert kind_of("* one\n* two") == SlideKind.CONTENT

    def test_image_text_split(self):
        text, match = image_text_split(Slide(number=1, content="Text\n![a](a.png){width=10}"))
        assert text == "Text"
        assert match.group(2) == "a.png"
        assert match.group(3) == "10"

    def test_image_text_split_without_image(self):
        with pytest.raises(ClassificationError):
            image_text_split(Slide(number=1, content="no image"))
