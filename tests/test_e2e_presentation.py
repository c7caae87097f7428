"""
End-to-end presentation tests

Tests the full path from markdown text to frames and navigation without a
terminal, strict pre-flight validation, and the command line entry point.
"""

import os
import shutil

import pytest

from termdown.__main__ import main
from termdown.config import AppSettings
from termdown.lib.classifier import SlideKind, slide_classify
from termdown.lib.navigation import KeyMap
from termdown.lib.parser import Parser
from termdown.lib.presenter import Presenter, deck_validate
from termdown.models import Mode


DECK = """---
title_font: standard
pagination_style: slide
---

# Welcome

---

## Part One

---

### Agenda

* parsing
* rendering
- static note

---

Left column
|||
Right column

---

Some words next to a picture
![chart](chart.png)

---

<!-- intentionally blank -->

---

```python
print("--- not a delimiter ---")
```
<!-- pagination: false -->
"""


@pytest.fixture
def deck(tmp_path):
    return Parser(DECK, "talk.md", base_dir=str(tmp_path)).parse()


@pytest.fixture
def presenter(deck):
    return Presenter(deck, KeyMap.from_settings(AppSettings()))


@pytest.fixture
def terminal(monkeypatch):
    monkeypatch.setattr(shutil, "get_terminal_size", lambda *args: os.terminal_size((80, 24)))


class TestDeck:
    """Test a complete deck"""

    def test_structure(self, deck):
        assert len(deck.slides) == 7
        assert deck.settings["pagination_style"] == "slide"
        assert [slide_classify(slide) for slide in deck.slides] == [
            SlideKind.TITLE,
            SlideKind.SECTION,
            SlideKind.CONTENT,
            SlideKind.COLUMNS,
            SlideKind.IMAGE,
            SlideKind.CONTENT,
            SlideKind.CONTENT,
        ]
        assert deck.slides[5].is_blank
        assert deck.slides[6].overrides == {"pagination": False}
        assert deck.bullets_totals == [0, 0, 2, 0, 0, 0, 0]

    def test_every_slide_renders(self, presenter, deck):
        for index in range(len(deck.slides)):
            presenter.state.index = index
            frame = presenter.frame_build(80, 24)
            assert len(frame.lines) == 24

    def test_walk_through(self, presenter, deck):
        """Stepping forward visits every bullet, then the end screen"""
        seen = []
        while presenter.state.mode == Mode.VIEWING:
            seen.append((presenter.state.index, presenter.state.reveal))
            presenter.key_handle("right")

        assert seen == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2), (3, 0), (4, 0), (5, 0), (6, 0)]
        assert presenter.state.mode == Mode.END
        assert "back to the last slide" in presenter.frame_build(80, 24).text()

        presenter.key_handle("left")
        assert (presenter.state.mode, presenter.state.index) == (Mode.VIEWING, 6)

    def test_pagination_text_and_override(self, presenter):
        assert "Slide 1 of 7" in presenter.frame_build(80, 24).text()
        presenter.state.index = 6
        assert "of 7" not in presenter.frame_build(80, 24).text()

    def test_help_overlay(self, presenter):
        presenter.key_handle("right")
        presenter.key_handle("?")
        assert presenter.state.mode == Mode.HELP
        assert "next bullet or slide" in presenter.frame_build(80, 24).text()

        presenter.key_handle("q")
        assert presenter.state.mode == Mode.VIEWING
        assert presenter.state.index == 1

    def test_quit(self, presenter):
        presenter.key_handle("q")
        assert presenter.state.exit_requested

    def test_resize_keeps_state(self, presenter):
        presenter.key_handle("right")
        before = presenter.state
        presenter.key_handle("resize")
        assert presenter.state == before

        presenter.frame_build(80, 24)
        images = presenter.renderer.images
        presenter.frame_build(120, 40)
        assert presenter.renderer.images is images


class TestValidation:
    """Test strict pre-flight checks"""

    def test_missing_image_is_reported(self, deck):
        issues = deck_validate(deck, 80, 24)
        assert len(issues) == 1
        assert "slide 5" in issues[0]
        assert "chart.png" in issues[0]

    def test_clean_deck(self, tmp_path):
        deck = Parser("# Hi\n---\n* a\n* b", base_dir=str(tmp_path)).parse()
        assert deck_validate(deck, 80, 24) == []

    def test_tall_slide(self):
        deck = Parser("\n".join(f"line {n}" for n in range(40)) + "\n---\nB").parse()
        issues = deck_validate(deck, 80, 24)
        assert len(issues) == 1
        assert "40 lines tall" in issues[0]

    def test_heading_slide_error(self):
        deck = Parser("# A\n# B\n---\nB").parse()
        issues = deck_validate(deck, 80, 24)
        assert len(issues) == 1
        assert "slide 1" in issues[0]


class TestCommandLine:
    """Test the termdown command"""

    def test_list_options(self, capsys):
        main(["--list-options"])
        out = capsys.readouterr().out
        assert "border_style" in out
        assert "aliases: h1_font" in out

    def test_source_required(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_missing_document(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "missing.md")])
        assert excinfo.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_empty_document(self, tmp_path, capsys):
        path = tmp_path / "empty.md"
        path.write_text("---\nbackground: black\n---\n", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([str(path)])
        assert excinfo.value.code == 1
        assert "no slides" in capsys.readouterr().err

    def test_strict_reports_issues(self, tmp_path, capsys, terminal):
        path = tmp_path / "talk.md"
        path.write_text("Intro\n---\nText\n![x](missing.png)\n", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([str(path), "--strict"])
        assert excinfo.value.code == 1
        err = capsys.readouterr().err
        assert "missing.png" in err
        assert "1 slide issue(s)" in err

    def test_needs_terminal(self, tmp_path, capsys, terminal):
        """Presenting without a terminal is an error, after a clean pre-flight"""
        path = tmp_path / "talk.md"
        path.write_text("# Hi\n---\nText\n", encoding="utf-8")
        with pytest.raises(SystemExit) as excinfo:
            main([str(path), "--strict"])
        assert excinfo.value.code == 1
        assert "interactive terminal" in capsys.readouterr().err

    def test_missing_theme(self, tmp_path, capsys):
        path = tmp_path / "talk.md"
        path.write_text("# Hi\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            main([str(path), "--theme", str(tmp_path / "none.yaml")])
        assert "Theme file not found" in capsys.readouterr().err
