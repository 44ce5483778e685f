"""Tests for diagram options and renderer settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from classmap.config import DiagramOptions, RendererSettings, load_options, make_options
from classmap.config.settings import DEFAULT_SERVER_URL, DEFAULT_TIMEOUT
from classmap.core.errors import ConfigurationError, ValidationError
from classmap.core.graph.model import Pair


# ---------------------------------------------------------------------------
# DiagramOptions
# ---------------------------------------------------------------------------


class TestMakeOptions:
    def test_defaults(self) -> None:
        options = make_options()
        assert isinstance(options, DiagramOptions)
        assert options.abstract_classes == frozenset()
        assert options.show_explanatory_column is True
        assert options.graph_dimensionality == "2d"
        assert options.classes == ()
        assert options.references is None
        assert options.reference_lookup() is None

    def test_relationship_inputs_normalized(self) -> None:
        options = make_options(parents=["Dog -> Animal"], associations=[{"A", "B"}])
        assert options.parents == (Pair("Dog", "Animal"),)
        assert options.associations == (Pair("A", "B", directed=False),)

    def test_abstract_classes_become_frozenset(self) -> None:
        assert make_options(abstract_classes=["A", "B"]).abstract_classes == frozenset({"A", "B"})

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            make_options(show_captions=False)
        assert exc_info.value.field == "show_captions"

    def test_unrecognized_dimensionality_accepted(self) -> None:
        assert make_options(graph_dimensionality="7d").graph_dimensionality == "7d"

    def test_reference_lookup(self) -> None:
        lookup = make_options(references={"Dog": ["Animal"]}).reference_lookup()
        assert lookup is not None
        assert list(lookup("Dog")) == ["Animal"]
        assert list(lookup("Cat")) == []

    def test_bad_show_explanatory_column(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            make_options(show_explanatory_column="sometimes")
        assert exc_info.value.field == "show_explanatory_column"


class TestLoadOptions:
    def test_loads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text(
            json.dumps(
                {
                    "parents": [["D", "C"], "D -> A"],
                    "regular_methods": {"D": ["x"]},
                    "abstract_classes": ["A"],
                    "graph_dimensionality": "3d",
                }
            ),
            encoding="utf-8",
        )
        options = load_options(path)
        assert options.parents == (Pair("D", "C"), Pair("D", "A"))
        assert options.regular_methods == {"D": ["x"]}
        assert options.abstract_classes == frozenset({"A"})
        assert options.graph_dimensionality == "3d"

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text("{}", encoding="utf-8")
        assert load_options(str(path)).parents == ()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_options(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text("{parents: ", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_options(path)

    def test_top_level_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValidationError) as exc_info:
            load_options(path)
        assert exc_info.value.field == "options"

    def test_shape_mismatch(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"parents": [["A", "B", "C"]]}), encoding="utf-8")
        with pytest.raises(ValidationError) as exc_info:
            load_options(path)
        assert exc_info.value.field == "parents"


# ---------------------------------------------------------------------------
# RendererSettings
# ---------------------------------------------------------------------------


class TestRendererSettings:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PLANTUML_SERVER_URL", "PLANTUML_EXECUTABLE", "PLANTUML_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self) -> None:
        settings = RendererSettings.from_env()
        assert settings.server_url == DEFAULT_SERVER_URL
        assert settings.executable is None
        assert settings.timeout == DEFAULT_TIMEOUT

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANTUML_SERVER_URL", "http://localhost:8080")
        monkeypatch.setenv("PLANTUML_EXECUTABLE", "/usr/local/bin/plantuml")
        monkeypatch.setenv("PLANTUML_TIMEOUT", "12.5")
        settings = RendererSettings.from_env()
        assert settings == RendererSettings("http://localhost:8080", "/usr/local/bin/plantuml", 12.5)

    def test_empty_values_use_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANTUML_EXECUTABLE", "")
        monkeypatch.setenv("PLANTUML_TIMEOUT", "")
        settings = RendererSettings.from_env()
        assert settings.executable is None
        assert settings.timeout == DEFAULT_TIMEOUT

    def test_bad_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANTUML_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="PLANTUML_TIMEOUT"):
            RendererSettings.from_env()
