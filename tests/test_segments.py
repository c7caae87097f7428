"""
Content segment tests

Tests decomposition of slide bodies into Text / Code / Image segments,
### header splitting and progressive bullet reveal.
"""

from termdown.lib.segments import (
    BulletReveal,
    bullets_count,
    header_split,
    images_locate,
    segments_parse,
)
from termdown.models import Slide, TextSegment, CodeSegment, ImageSegment


class TestSegmentsParse:
    """Test segment decomposition"""

    def test_empty_body(self):
        assert segments_parse("") == []

    def test_plain_text(self):
        assert segments_parse("Just text\n* bullet") == [TextSegment("Just text\n* bullet")]

    def test_document_order(self):
        """Code and images are ordered by offset regardless of type"""
        body = "Intro\n![logo](logo.png){width=20}\n```py\nx = 1\n```\nOutro"
        assert segments_parse(body) == [
            TextSegment("Intro\n"),
            ImageSegment(alt="logo", path="logo.png", width=20),
            TextSegment("\n"),
            CodeSegment(language="py", code="x = 1"),
            TextSegment("\nOutro"),
        ]

    def test_image_without_width(self):
        assert segments_parse("![](https://example.org/a.png)") == [
            ImageSegment(alt="", path="https://example.org/a.png", width=None)
        ]

    def test_image_inside_fence_is_code(self):
        assert segments_parse("```\n![a](b.png)\n```") == [CodeSegment(language="", code="![a](b.png)")]

    def test_text_is_preserved(self):
        """Concatenated text segments keep all prose"""
        body = "one\n```\ncode\n```\ntwo"
        texts = [s.text for s in segments_parse(body) if isinstance(s, TextSegment)]
        assert texts == ["one\n", "\ntwo"]

    def test_images_locate_skips_fences(self):
        matches = images_locate("![a](x.png)\n```\n![b](y.png)\n```\n![c](z.png)")
        assert [m.group(2) for m in matches] == ["x.png", "z.png"]


class TestHeaderSplit:
    """Test ### header extraction"""

    def test_header(self):
        assert header_split("### Agenda\n\n* one\n* two") == ("Agenda", "* one\n* two")

    def test_header_only(self):
        assert header_split("### Agenda") == ("Agenda", "")

    def test_no_header(self):
        assert header_split("* one") == (None, "* one")

    def test_title_is_not_a_header(self):
        assert header_split("## Part") == (None, "## Part")


class TestBullets:
    """Test progressive bullet counting and reveal"""

    def test_count(self):
        assert bullets_count("* one\n* two\n- three") == 2

    def test_count_ignores_code(self):
        assert bullets_count("```\n* x\n```\n* y") == 1

    def test_count_needs_space(self):
        """Emphasis at line start is not a bullet"""
        assert bullets_count("*bold claim*\n  * nested") == 1

    def test_reveal_one(self):
        """Hidden bullets leave a blank line, static bullets stay"""
        reveal = BulletReveal(visible=1)
        assert reveal.text_filter("* one\n* two\n- three") == "* one\n\n- three"
        assert (reveal.seen, reveal.shown) == (2, 1)

    def test_reveal_none_hides_all_progressive(self):
        reveal = BulletReveal(visible=0)
        assert reveal.text_filter("* one\n- two") == "\n- two"
        assert reveal.shown == 0

    def test_reveal_all(self):
        reveal = BulletReveal()
        text = "* one\n* two"
        assert reveal.text_filter(text) == text
        assert reveal.shown == 2

    def test_reveal_counts_across_calls(self):
        """One instance counts bullets across segments and columns"""
        reveal = BulletReveal(visible=1)
        assert reveal.text_filter("* left") == "* left"
        assert reveal.text_filter("* right") == ""
        assert (reveal.seen, reveal.shown) == (2, 1)

    def test_reveal_never_exceeds_total(self):
        for visible in range(5):
            reveal = BulletReveal(visible=visible)
            reveal.text_filter("* a\n* b\n* c")
            assert reveal.shown == min(visible, 3)

    def test_slide_total_is_cached(self):
        slide = Slide(number=1, content="* a\n* b\n- c")
        assert slide.bullets_total == 2
        assert slide.bullets_total == 2
        assert Slide(number=2, content="", is_blank=True).bullets_total == 0
