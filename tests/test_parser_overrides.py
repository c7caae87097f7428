"""
Per-slide override comment tests

Tests <!-- key: value --> extraction: recognized comments are removed and
applied to one slide only, everything else stays in the text.
"""

from termdown.lib.parser import Parser, overrides_extract


class TestOverridesExtract:
    """Test extraction on a single slide text"""

    def test_comment_line_is_removed(self):
        result = overrides_extract("# Slide\n<!-- pagination: false -->")
        assert result.content == "# Slide\n"
        assert result.overrides == {"pagination": False}
        assert result.warnings == []

    def test_inline_comment(self):
        """Only the comment is removed from a line that holds other text"""
        result = overrides_extract("A <!-- color: red --> B")
        assert result.content == "A  B"
        assert result.overrides == {"color": "red"}

    def test_alias_key(self):
        result = overrides_extract("<!-- h2-color: red -->\n## Part")
        assert result.overrides == {"section_color": "red"}
        assert result.content == "## Part"

    def test_last_comment_wins(self):
        result = overrides_extract("<!-- pagination: false -->\n<!-- pagination: true -->\nA")
        assert result.overrides == {"pagination": True}
        assert result.content == "A"

    def test_unknown_key_stays(self):
        text = "A <!-- colour: red -->"
        result = overrides_extract(text)
        assert result.content == text
        assert result.overrides == {}
        assert len(result.warnings) == 1
        assert "colour" in result.warnings[0]

    def test_value_outside_pattern_stays(self):
        text = "<!-- footer: <b> -->"
        result = overrides_extract(text)
        assert result.content == text
        assert result.overrides == {}
        assert len(result.warnings) == 1

    def test_invalid_boolean_stays(self):
        result = overrides_extract("<!-- pagination: maybe -->", start_line=7)
        assert result.overrides == {}
        assert "line 7" in result.warnings[0]

    def test_comment_inside_fence_is_code(self):
        """Comments inside fenced code are never applied"""
        text = "```html\n<!-- pagination: false -->\n```"
        result = overrides_extract(text)
        assert result.content == text
        assert result.overrides == {}
        assert result.warnings == []

    def test_plain_comment_is_not_an_override(self):
        text = "<!-- speaker notes go here -->\nA"
        result = overrides_extract(text)
        assert result.content == text
        assert result.overrides == {}
        assert result.warnings == []

    def test_extraction_is_idempotent(self):
        """Running extraction on its own output changes nothing"""
        text = "A\n<!-- color: red -->\n<!-- colour: red -->\nB <!-- footer: Hi -->"
        first = overrides_extract(text)
        second = overrides_extract(first.content)
        assert second.content == first.content
        assert second.overrides == {}


class TestOverridesInDeck:
    """Test overrides applied through the parser"""

    def test_override_applies_to_one_slide(self):
        deck = Parser("Text here\n<!-- pagination: false -->\n---\nB").parse()

        first, second = deck.slides
        assert first.content == "Text here"
        assert "<!--" not in first.content
        assert first.overrides == {"pagination": False}
        assert second.overrides == {}

        assert first.settings_effective(deck.settings)["pagination"] is False
        assert second.settings_effective(deck.settings)["pagination"] is True
        assert deck.settings["pagination"] is True

    def test_warning_names_source_line(self):
        deck = Parser("A\n---\nB\n<!-- colour: red -->").parse()
        assert any("line 4" in warning for warning in deck.warnings)
        assert deck.slides[1].content == "B\n<!-- colour: red -->"

    def test_override_only_slide_is_kept(self):
        """A slide holding only an override comment keeps its number"""
        deck = Parser("A\n---\n<!-- background: blue -->\n---\nB").parse()
        assert len(deck.slides) == 3
        assert deck.slides[1].content == ""
        assert deck.slides[1].overrides == {"background": "blue"}
