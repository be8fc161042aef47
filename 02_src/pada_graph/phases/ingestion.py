"""Parse result ingestion phase with JSON file support and a sample fallback."""

import json
from pathlib import Path
from typing import Any, Dict, List

from ..graph_model import ParseResult
from ..pipeline import PipelinePhase


class ParseResultIngestionPhase(PipelinePhase):
    phase_name = "ingestion"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        input_path = context.get("input_path")
        if input_path:
            payload = json.loads(Path(str(input_path)).read_text(encoding="utf-8"))
            source = str(input_path)
        else:
            payload = self._build_fallback_payload()
            source = "sample"
        parse_results = ParseResult.from_payload(payload)
        return {
            "parse_results": parse_results,
            "ingestion_output": {
                "source": source,
                "result_count": len(parse_results),
                "analysis_count": sum(len(result.analysis) for result in parse_results),
            },
        }

    @staticmethod
    def _build_fallback_payload() -> List[Dict[str, Any]]:
        vagvidam = {"pada": "vāgvidāṃ", "root": "vāgvid", "tags": ["noun", "gen", "pl", "masc"]}
        varam = {"pada": "varam", "root": "vara", "tags": ["noun", "acc", "sg", "masc"]}
        return [
            {
                "analysis": [
                    {
                        "graph": [
                            {"node": varam},
                            {"node": vagvidam, "predecessor": varam, "relation": "ṣaṣṭhīsambandhaḥ"},
                        ]
                    },
                    {
                        "graph": [
                            {"node": {**varam, "tags": ["noun", "acc", "sg"]}},
                            {"node": vagvidam, "predecessor": varam, "relation": "ṣaṣṭhīsambandhaḥ"},
                        ]
                    },
                ]
            }
        ]
