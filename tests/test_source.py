"""
Document source and theme tests

Tests local and remote document resolution (the temporary copy of a remote
document must disappear however the run ends) and YAML theme loading.
"""

import pytest
import requests

from termdown.lib import source as source_module
from termdown.lib.options import registry
from termdown.lib.parser import Parser
from termdown.lib.renderer import SlideRenderer
from termdown.lib.source import SourceError, source_open, source_read
from termdown.lib.theme import Theme, ThemeError


class FakeResponse:
    def __init__(self, content, status=200):
        self.content = content
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


@pytest.fixture
def remote(monkeypatch):
    """Serve every GET with the given response"""
    calls = []

    def serve(response):
        def fake_get(url, timeout=None):
            calls.append((url, timeout))
            return response
        monkeypatch.setattr(source_module.requests, "get", fake_get)
        return calls

    return serve


class TestLocalSource:
    """Test local documents"""

    def test_local_file(self, tmp_path):
        path = tmp_path / "talk.md"
        path.write_text("# Hello", encoding="utf-8")

        with source_open(str(path)) as source:
            assert source.path == path
            assert source.label == str(path)
            assert source.base_dir == str(tmp_path.resolve())
            assert not source.remote
            assert source_read(source) == "# Hello"
        assert path.exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceError, match="no such file"):
            with source_open(str(tmp_path / "missing.md")):
                pass

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "talk.md"
        path.write_bytes(b"\xff\xfe\x00bad")
        with source_open(str(path)) as source:
            with pytest.raises(SourceError):
                source_read(source)


class TestRemoteSource:
    """Test documents fetched over http(s)"""

    def test_remote_document(self, remote):
        calls = remote(FakeResponse(b"# Remote"))

        with source_open("https://example.org/talks/deck.md", timeout=2.5) as source:
            temp = source.path
            assert temp.exists()
            assert source.remote
            assert source.label == "https://example.org/talks/deck.md"
            assert source.base_dir == "https://example.org/talks/"
            assert source_read(source) == "# Remote"

        assert not temp.exists()
        assert calls == [("https://example.org/talks/deck.md", 2.5)]

    def test_temp_file_removed_on_error(self, remote):
        remote(FakeResponse(b"# Remote"))

        with pytest.raises(RuntimeError):
            with source_open("https://example.org/deck.md") as source:
                temp = source.path
                raise RuntimeError("presentation crashed")
        assert not temp.exists()

    def test_http_error(self, remote):
        remote(FakeResponse(b"", status=404))
        with pytest.raises(SourceError, match="404"):
            with source_open("https://example.org/deck.md"):
                pass

    def test_network_error(self, monkeypatch):
        def fake_get(url, timeout=None):
            raise requests.ConnectionError("unreachable")
        monkeypatch.setattr(source_module.requests, "get", fake_get)

        with pytest.raises(SourceError, match="unreachable"):
            with source_open("https://example.org/deck.md"):
                pass


class TestTheme:
    """Test YAML themes"""

    def test_theme_settings(self, tmp_path):
        path = tmp_path / "dark.yaml"
        path.write_text(
            "background: black\n"
            "border_style: heavy\n"
            "pagination: false\n"
            "title_font: doom, standard\n"
            "colour: red\n",
            encoding="utf-8",
        )
        theme = Theme(str(path))
        settings = theme.settings_get()

        assert settings["background"] == "black"
        assert settings["border_style"] == "heavy"
        assert settings["pagination"] is False
        assert settings["title_font"] == "doom, standard"
        assert settings["color"] == "default"
        assert len(theme.warnings) == 1
        assert "colour" in theme.warnings[0]

    def test_null_entry_keeps_default(self, tmp_path):
        """A key with no value (YAML null) is reported and skipped"""
        path = tmp_path / "theme.yaml"
        path.write_text("title_font:\nbackground: black\n", encoding="utf-8")
        theme = Theme(str(path))
        base = theme.settings_get()

        assert base["title_font"] == registry.defaults_get()["title_font"]
        assert base["background"] == "black"
        assert len(theme.warnings) == 1
        assert "empty value" in theme.warnings[0]

        deck = Parser("# Hello", settings=base).parse()
        frame = SlideRenderer(deck.settings, 80, 24).frame_build(deck.slides[0], None, 1)
        assert len(frame.lines) == 24

    def test_frontmatter_wins_over_theme(self, tmp_path):
        path = tmp_path / "theme.yaml"
        path.write_text("background: black\ncolor: white\n", encoding="utf-8")
        base = Theme(str(path)).settings_get()

        deck = Parser("---\ncolor: red\n---\nA", settings=base).parse()
        assert deck.settings["background"] == "black"
        assert deck.settings["color"] == "red"

    def test_empty_theme(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Theme(str(path)).settings_get()["border_style"] == "rounded"

    def test_missing_theme(self, tmp_path):
        with pytest.raises(ThemeError, match="not found"):
            Theme(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("background: [black\n", encoding="utf-8")
        with pytest.raises(ThemeError):
            Theme(str(path))

    def test_theme_must_be_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- black\n- white\n", encoding="utf-8")
        with pytest.raises(ThemeError, match="mapping"):
            Theme(str(path))
