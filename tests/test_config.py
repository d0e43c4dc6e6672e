"""Tests for kalenuxer.config."""
import json

import pytest

from kalenuxer.build import iter_sources
from kalenuxer.config import load_settings, open_project, resolve_project_dir
from kalenuxer.core.receipt import StopRule


class TestResolveProjectDir:
    """Tests for resolve_project_dir."""

    def test_website_project(self, project_root, project_dir):
        assert resolve_project_dir("demo", project_root) == project_dir

    def test_main_project_is_controller(self, tmp_path):
        (tmp_path / "controller").mkdir()
        assert resolve_project_dir("main", tmp_path) == tmp_path / "controller"

    def test_missing_name_stops(self, tmp_path):
        with pytest.raises(StopRule, match="not defined"):
            resolve_project_dir("", tmp_path)

    def test_missing_dir_stops(self, tmp_path):
        with pytest.raises(StopRule):
            resolve_project_dir("ghost", tmp_path)


class TestSettings:
    """Tests for load_settings."""

    def test_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text("{}", encoding="utf-8")
        settings = load_settings(tmp_path)
        assert settings.languages == []
        assert settings.home_page == "tr/anasayfa.html"
        assert settings.upload_dir is None
        assert settings.source_dir("css") == "css"

    def test_values(self, project_dir):
        settings = load_settings(project_dir)
        assert settings.languages == ["en", "fr"]
        assert settings.home_page == "en/index.html"

    def test_malformed_stops(self, tmp_path):
        (tmp_path / "settings.json").write_text("{", encoding="utf-8")
        with pytest.raises(StopRule, match="Invalid JSON"):
            load_settings(tmp_path)

    def test_unknown_source_category_stops(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"sources": {"fonts": "f"}}), encoding="utf-8")
        with pytest.raises(StopRule, match="fonts"):
            load_settings(tmp_path)

    def test_sources_remap_directories(self, project_root, project_dir):
        """sources moves a category to another directory under site/."""
        settings = json.loads((project_dir / "settings.json").read_text(encoding="utf-8"))
        settings["sources"] = {"css": "styles"}
        (project_dir / "settings.json").write_text(json.dumps(settings), encoding="utf-8")
        (project_dir / "site" / "styles").mkdir()
        (project_dir / "site" / "styles" / "main.css").write_text("x", encoding="utf-8")

        ctx = open_project("demo", base="test", root=project_root)
        assert [key for key, _ in iter_sources(ctx, "css")] == ["main.css"]


class TestOpenProject:
    """Tests for open_project."""

    def test_ledgers_registered(self, build_ctx, project_dir):
        """Every category is registered under store/times/<base>/."""
        assert build_ctx.ledger.paths["img"] == project_dir / "store" / "times" / "test" / "img.json"
        assert build_ctx.output_dir == project_dir / "dist" / "release"
        assert build_ctx.languages == ["en", "fr"]
