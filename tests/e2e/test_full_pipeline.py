"""End-to-end tests: options file to graph, PlantUML text and rendered bytes."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from classmap.config import load_options
from classmap.core.graph.assembler import build_graph
from classmap.core.graph.model import EdgeKind
from classmap.core.plantuml.renderer import encode_plantuml, render_via_server
from classmap.core.plantuml.serializer import plantuml_for_options
from classmap.core.relations.builder import model_from_options

ZOO = {
    "parents": [
        ["Lion", "Mammal"],
        ["Eagle", "Bird"],
        ["Mammal", "Animal"],
        ["Bird", "Animal"],
        ["Keeper", "Lion"],
    ],
    "associations": [["Keeper", "Lion"], "Zoo -- Keeper"],
    "aggregations": [["Enclosure", "Zoo"]],
    "abstract_methods": {"Animal": ["eat", "sleep"]},
    "regular_methods": {"Lion": ["roar"], "Eagle": ["fly"], "Ticket": ["print"]},
    "abstract_classes": ["Animal"],
    "show_explanatory_column": True,
    "graph_dimensionality": "3d",
}


@pytest.fixture()
def zoo_file(tmp_path: Path) -> Path:
    path = tmp_path / "zoo.json"
    path.write_text(json.dumps(ZOO), encoding="utf-8")
    return path


class TestFullPipeline:
    def test_model(self, zoo_file: Path) -> None:
        model = model_from_options(load_options(zoo_file))

        assert model.class_names == (
            "Lion",
            "Mammal",
            "Eagle",
            "Bird",
            "Animal",
            "Keeper",
            "Zoo",
            "Enclosure",
            "Ticket",
        )
        kinds = {edge.key: edge.kind for edge in model.edges}
        assert kinds[("Lion", "Mammal")] is EdgeKind.INHERITANCE
        assert kinds[("Keeper", "Lion")] is EdgeKind.DIRECTED_ASSOCIATION
        assert kinds[("Zoo", "Keeper")] is EdgeKind.ASSOCIATION
        assert model.edges[-1].kind is EdgeKind.AGGREGATION
        assert len(model.edges) == 7

    def test_graph(self, zoo_file: Path) -> None:
        graph = build_graph(load_options(zoo_file))

        assert graph["dim"] == 3
        assert graph.vcount() == 9
        assert graph.ecount() == 7
        animal = graph.vs.find(name="Animal")
        assert animal["is_abstract"] is True
        assert "<I>eat</I><BR/><I>sleep</I>" in animal["label"]
        ticket = graph.vs.find(name="Ticket")
        assert ticket.degree() == 0

    def test_plantuml(self, zoo_file: Path) -> None:
        text = plantuml_for_options(load_options(zoo_file))

        assert text.startswith("@startuml\nclass Lion {\n roar\n}\nLion --> Mammal\n")
        assert "abstract class Animal {\n {abstract} eat\n {abstract} sleep\n}" in text
        assert "class Keeper {\n}\nKeeper --> Lion" in text
        assert "class Ticket {\n print\n}\n@enduml" in text
        assert text == plantuml_for_options(load_options(zoo_file))

    def test_render_through_server(self, zoo_file: Path) -> None:
        text = plantuml_for_options(load_options(zoo_file))
        expected_path = f"/plantuml/svg/{encode_plantuml(text)}"

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == expected_path
            return httpx.Response(200, content=b"<svg/>", headers={"content-type": "image/svg+xml"})

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            result = render_via_server(text, server_url="http://uml.test/plantuml", client=client)

        assert result.raise_for_error() == b"<svg/>"
