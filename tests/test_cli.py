"""
Tests for the file-to-file pipeline and its command line.
"""

import json

import pytest

from pada_graph.cli import main, run_pipeline
from pada_graph.layout import LayoutOptions
from pada_graph.phases import GraphValidationPhase
from pada_graph.pipeline import PipelinePhase, PipelineRunner
from pada_graph.settings import LayoutSettings


class TestRunPipeline:
    def test_sample_input(self):
        artifact = run_pipeline()

        assert [node["data"]["label"] for node in artifact["nodes"]] == ["Graph 1", "varam", "vāgvidāṃ"]
        meta = artifact["meta"]
        assert meta["ingestion_report"] == {"source": "sample", "result_count": 1, "analysis_count": 2}
        assert meta["build_report"]["layout"] == "hierarchy"
        assert meta["build_report"]["stages"][-1] == "done"
        assert meta["validation_report"]["overlap_count"] == 0
        assert meta["validation_report"]["warnings"] == []

    def test_file_input_with_layered_layout(self, tmp_path):
        payload = [
            {
                "analysis": [
                    {"graph": [{"node": {"pada": "rāma", "root": "rāma", "tags": ["noun"]}}]}
                ]
            }
        ]
        input_path = tmp_path / "parse.json"
        input_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")

        artifact = run_pipeline(str(input_path), settings=LayoutSettings(layout="layered"))

        assert len(artifact["nodes"]) == 2
        assert artifact["nodes"][1]["target_position"] == "top"
        assert artifact["meta"]["validation_report"]["overlap_count"] == 0

    def test_parent_connector_is_not_dangling(self):
        artifact = run_pipeline(parent_id="parser")

        assert artifact["edges"][-1]["source"] == "parser"
        assert artifact["meta"]["validation_report"]["dangling_edge_count"] == 0

    def test_per_analysis_rendering(self):
        artifact = run_pipeline(consolidate=False)
        roots = [node for node in artifact["nodes"] if node["data"]["label"].startswith("Graph")]
        assert len(roots) == 2


class TestMain:
    def test_writes_artifact(self, tmp_path, capsys):
        output_path = tmp_path / "out" / "graph.json"

        exit_code = main(["--output-path", str(output_path), "--layout", "layered", "--direction", "LR"])

        assert exit_code == 0
        artifact = json.loads(output_path.read_text(encoding="utf-8"))
        assert artifact["meta"]["build_report"]["layout"] == "layered"
        assert artifact["nodes"][0]["source_position"] == "right"
        assert "Parse graph saved to" in capsys.readouterr().out


class TestPipelineRunner:
    def test_non_dict_phase_result_raises(self):
        class BrokenPhase(PipelinePhase):
            phase_name = "broken"

            def run(self, context):
                return None

        with pytest.raises(TypeError):
            PipelineRunner([BrokenPhase()]).run({})

    def test_records_completed_phases(self):
        class EchoPhase(PipelinePhase):
            phase_name = "echo"

            def run(self, context):
                return {"echo": True}

        context = PipelineRunner([EchoPhase()]).run({"input": 1})
        assert context == {"input": 1, "echo": True, "completed_phases": ["echo"]}

    def test_missing_required_keys_name_the_phase(self):
        class NeedsGraphPhase(PipelinePhase):
            phase_name = "needs_graph"
            requires = ("graph",)

            def run(self, context):
                return {}

        with pytest.raises(ValueError, match="needs_graph.*graph"):
            PipelineRunner([NeedsGraphPhase()]).run({"parse_results": []})

    def test_default_phases_reject_a_graph_free_validation_run(self):
        with pytest.raises(ValueError, match="validation"):
            PipelineRunner([GraphValidationPhase(LayoutOptions())]).run({})
