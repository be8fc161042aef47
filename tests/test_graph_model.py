"""
Tests for decoding upstream parse payloads and serialising graphs.
"""

import json

import pytest

from pada_graph.graph_model import (
    Graph,
    HandlePosition,
    LayoutNode,
    ParseRequest,
    ParseResult,
    ParseWord,
)


PAYLOAD = [
    {
        "analysis": [
            {
                "graph": [
                    {"node": {"pada": "varam", "root": "vara", "tags": ["noun", "acc"]}},
                    {
                        "node": {"pada": "vāgvidāṃ", "root": "vāgvid", "tags": ["noun", "gen"]},
                        "predecessor": {"pada": "varam", "root": "vara", "tags": ["noun", "acc"]},
                        "relation": "ṣaṣṭhīsambandhaḥ",
                    },
                ]
            }
        ]
    }
]


class TestParseResultDecoding:
    def test_from_payload(self):
        results = ParseResult.from_payload(PAYLOAD)

        graph = results[0].analysis[0].graph
        assert graph[0].is_root
        assert graph[0].node == ParseWord("varam", "vara", ("noun", "acc"))
        assert graph[1].predecessor.pada == "varam"
        assert graph[1].relation == "ṣaṣṭhīsambandhaḥ"

    def test_results_wrapper_and_bare_edge_lists(self):
        results = ParseResult.from_payload({"results": [{"analysis": [[{"node": {"pada": "rāma"}}]]}]})

        edge = results[0].analysis[0].graph[0]
        assert edge.node == ParseWord("rāma", "", ())
        assert edge.relation is None

    def test_round_trip_preserves_payload(self):
        results = ParseResult.from_payload(PAYLOAD)
        assert [result.to_dict() for result in results] == PAYLOAD

    def test_missing_pada_decodes_as_empty(self):
        results = ParseResult.from_payload([{"analysis": [{"graph": [{"node": {}}]}]}])
        assert results[0].analysis[0].graph[0].node.pada == ""

    @pytest.mark.parametrize("payload", ["text", [1], [{"analysis": [{"graph": ["edge"]}]}]])
    def test_malformed_payload_raises(self, payload):
        with pytest.raises(ValueError):
            ParseResult.from_payload(payload)


class TestParseRequest:
    def test_default_payload(self):
        assert ParseRequest().to_payload() == {
            "text": "vāgvidāṃ varam",
            "schemeFrom": "IAST",
            "schemeTo": "IAST",
            "preSegmented": False,
            "limit": 2,
        }


class TestGraphJson:
    def test_to_json_is_serialisable(self):
        node = LayoutNode(id="a", data={"tags": ("noun",)}, source_position=HandlePosition.BOTTOM)
        payload = Graph(nodes=[node]).to_json()

        assert payload["nodes"][0]["source_position"] == "bottom"
        assert payload["nodes"][0]["position"] == {"x": 0.0, "y": 0.0}
        json.dumps(payload)
