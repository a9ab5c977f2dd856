# tests/test_models.py
"""
Tests for the heat map models.

Covers:
- clamp_heat / edge_key helpers
- HeatNode / HeatEdge nudging
- HeatMap document layout ([key, record] pairs) and round-trips
- Defaults for missing document fields
"""

import json
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from mercury_evolution.constants import HEAT_MAP_VERSION
from mercury_evolution.models import (
    HeatEdge,
    HeatMap,
    HeatNode,
    IntentAnalysis,
    IntentCategory,
    KnowledgePath,
    NavigationSession,
    clamp_heat,
    edge_key,
)
from tests.helpers import make_path


class TestHelpers:
    def test_clamp_upper(self):
        assert clamp_heat(1.7) == 1.0

    def test_clamp_lower(self):
        assert clamp_heat(-0.2) == 0.0

    def test_clamp_inside(self):
        assert clamp_heat(0.4) == pytest.approx(0.4)

    def test_edge_key_is_directional(self):
        assert edge_key("a.md", "b.md") == "a.md→b.md"
        assert edge_key("a.md", "b.md") != edge_key("b.md", "a.md")


class TestHeatNode:
    def test_nudge_increments(self):
        node = HeatNode(heat=0.1, access_count=1)
        node.nudge(0.1)
        assert node.heat == pytest.approx(0.2)
        assert node.access_count == 2

    def test_nudge_clamps(self):
        node = HeatNode(heat=0.95, access_count=5)
        node.nudge(0.1)
        assert node.heat == 1.0

    def test_nudge_updates_timestamp(self):
        node = HeatNode(heat=0.1, last_accessed=datetime(2020, 1, 1, tzinfo=UTC))
        node.nudge(0.1)
        assert node.last_accessed.year > 2020

    def test_heat_above_one_rejected(self):
        with pytest.raises(PydanticValidationError):
            HeatNode(heat=1.5)


class TestHeatEdge:
    def test_key(self):
        edge = HeatEdge(source="a", target="b", heat=0.1, traversal_count=1)
        assert edge.key == "a→b"

    def test_nudge(self):
        edge = HeatEdge(source="a", target="b", heat=0.1, traversal_count=1)
        edge.nudge(0.1)
        assert edge.heat == pytest.approx(0.2)
        assert edge.traversal_count == 2


class TestKnowledgePath:
    def test_defaults(self):
        path = KnowledgePath(id="x", intent="debug")
        assert path.heat == 1.0
        assert path.access_count == 1
        assert path.sequence == []

    def test_entry_point(self):
        assert make_path(sequence=["first.md", "second.md"]).entry_point == "first.md"

    def test_entry_point_empty(self):
        assert make_path(sequence=[]).entry_point is None

    def test_success_not_clamped(self):
        assert make_path(success=1.5).success == 1.5


class TestHeatMapDocument:
    @staticmethod
    def _populated() -> HeatMap:
        heat_map = HeatMap()
        heat_map.nodes["a.md"] = HeatNode(heat=0.3, access_count=3)
        heat_map.nodes["b.md"] = HeatNode(heat=0.1, access_count=1)
        heat_map.edges["a.md→b.md"] = HeatEdge(source="a.md", target="b.md", heat=0.1, traversal_count=1)
        heat_map.paths.append(make_path())
        return heat_map

    def test_default_is_empty(self):
        heat_map = HeatMap()
        assert heat_map.paths == []
        assert heat_map.nodes == {}
        assert heat_map.edges == {}
        assert heat_map.intents == {}
        assert heat_map.version == HEAT_MAP_VERSION

    def test_nodes_serialized_as_pairs(self):
        doc = self._populated().to_document()
        assert doc["nodes"][0][0] == "a.md"
        assert doc["nodes"][0][1]["heat"] == pytest.approx(0.3)
        assert doc["edges"][0][0] == "a.md→b.md"
        assert doc["edges"][0][1]["from"] == "a.md"
        assert doc["edges"][0][1]["to"] == "b.md"
        assert doc["intents"] == []

    def test_records_use_camel_case_keys(self):
        doc = self._populated().to_document()

        assert set(doc) == {"paths", "nodes", "edges", "intents", "lastMaintenance", "version"}
        assert set(doc["nodes"][0][1]) == {"heat", "lastAccessed", "accessCount", "avgDwellTime"}
        assert set(doc["edges"][0][1]) == {"from", "to", "heat", "traversalCount", "lastTraversed"}
        path = doc["paths"][0]
        assert {"lastAccessed", "accessCount"} <= set(path)
        assert set(path["metadata"]) == {"sessionId", "interactionCount", "source"}

    def test_timestamps_written_as_epoch_millis(self):
        heat_map = HeatMap(last_maintenance=datetime(2024, 1, 1, tzinfo=UTC))
        heat_map.nodes["a.md"] = HeatNode(heat=0.1, last_accessed=datetime(2024, 1, 1, 0, 0, 1, 500000, tzinfo=UTC))

        doc = heat_map.to_document()

        assert doc["lastMaintenance"] == 1704067200000
        assert doc["nodes"][0][1]["lastAccessed"] == 1704067201500

    def test_python_dump_keeps_datetimes(self):
        node = HeatNode(heat=0.1)
        assert isinstance(node.model_dump()["last_accessed"], datetime)

    def test_document_is_json_serializable(self):
        doc = self._populated().to_document()
        assert json.loads(json.dumps(doc)) == doc

    def test_round_trip(self):
        original = self._populated()
        restored = HeatMap.from_document(json.loads(json.dumps(original.to_document())))
        assert restored.nodes == original.nodes
        assert restored.edges == original.edges
        assert restored.paths == original.paths
        assert restored.version == original.version

    def test_accepts_mapping_layout(self):
        restored = HeatMap.from_document({"nodes": {"a.md": {"heat": 0.2, "accessCount": 2}}})
        assert restored.nodes["a.md"].access_count == 2

    def test_reads_original_document(self):
        restored = HeatMap.from_document(
            {
                "paths": [
                    {
                        "id": "0a1b2c3d4e5f",
                        "sequence": ["a.md", "b.md"],
                        "intent": "debug sync",
                        "timestamp": 1704067200000,
                        "duration": 4200,
                        "success": 0.9,
                        "heat": 1.0,
                        "lastAccessed": 1704067204200,
                        "accessCount": 1,
                        "metadata": {"sessionId": "s1", "interactionCount": 2},
                    }
                ],
                "nodes": [["a.md", {"heat": 0.2, "lastAccessed": 1704067200000, "accessCount": 2, "avgDwellTime": 0}]],
                "edges": [
                    [
                        "a.md→b.md",
                        {"from": "a.md", "to": "b.md", "heat": 0.1, "traversalCount": 1, "lastTraversed": 1704067204200},
                    ]
                ],
                "intents": [],
                "lastMaintenance": 1704067200000,
                "version": "1.0.0",
            }
        )

        path = restored.paths[0]
        assert path.timestamp == datetime(2024, 1, 1, tzinfo=UTC)
        assert path.last_accessed == datetime(2024, 1, 1, 0, 0, 4, 200000, tzinfo=UTC)
        assert path.metadata.session_id == "s1"
        assert path.metadata.interaction_count == 2
        assert restored.nodes["a.md"].access_count == 2
        edge = restored.edges["a.md→b.md"]
        assert (edge.source, edge.target) == ("a.md", "b.md")
        assert edge.traversal_count == 1
        assert restored.last_maintenance == datetime(2024, 1, 1, tzinfo=UTC)

    def test_missing_fields_defaulted(self):
        restored = HeatMap.from_document({"paths": None, "nodes": None, "version": None, "lastMaintenance": None})
        assert restored.paths == []
        assert restored.nodes == {}
        assert restored.version == HEAT_MAP_VERSION
        assert restored.last_maintenance is not None

    def test_hottest_nodes_ordered(self):
        ranked = self._populated().hottest_nodes(10)
        assert [path for path, _ in ranked] == ["a.md", "b.md"]

    def test_hottest_nodes_limited(self):
        assert len(self._populated().hottest_nodes(1)) == 1

    def test_strongest_edges_negative_limit(self):
        assert self._populated().strongest_edges(-1) == []


class TestOtherModels:
    def test_intent_analysis_defaults(self):
        analysis = IntentAnalysis()
        assert analysis.intent == IntentCategory.GENERAL
        assert analysis.confidence == 0.5

    def test_session_last_path(self):
        session = NavigationSession(id="s1", intent="x", paths=["a", "b"])
        assert session.last_path == "b"

    def test_session_elapsed(self):
        start = datetime(2024, 1, 1, tzinfo=UTC)
        session = NavigationSession(id="s1", intent="x", start_time=start)
        assert session.elapsed_ms(datetime(2024, 1, 1, 0, 0, 2, tzinfo=UTC)) == 2000
