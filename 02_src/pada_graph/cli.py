"""CLI entrypoint: build a positioned parse graph from a JSON file of parse results."""

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from .builder import ParseGraphBuilder
from .layout import LAYOUT_STRATEGIES, get_layout_strategy
from .phases import GraphBuildPhase, GraphValidationPhase, ParseResultIngestionPhase
from .pipeline import PipelinePhase, PipelineRunner
from .settings import LayoutSettings, load_settings


def build_default_phases(builder: ParseGraphBuilder) -> List[PipelinePhase]:
    return [
        ParseResultIngestionPhase(),
        GraphBuildPhase(builder),
        GraphValidationPhase(builder.options),
    ]


def run_pipeline(
    input_path: str = "",
    settings: Optional[LayoutSettings] = None,
    parent_id: Optional[str] = None,
    consolidate: bool = True,
) -> Dict[str, Any]:
    settings = settings or LayoutSettings()
    layout = get_layout_strategy(settings.layout)
    builder = ParseGraphBuilder(
        layout=layout,
        options=settings.to_options(layout.default_options),
        consolidate=consolidate,
    )
    initial_context: Dict[str, Any] = {
        "input_path": input_path,
        "parent_id": parent_id,
    }
    runner = PipelineRunner(phases=build_default_phases(builder))
    final_context = runner.run(initial_context)
    artifact = final_context["graph"].to_json()
    artifact["meta"] = {
        "input_path": input_path,
        "ingestion_report": final_context.get("ingestion_output", {}),
        "build_report": final_context.get("build_output", {}),
        "validation_report": final_context.get("validation_report", {}),
    }
    return artifact


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a positioned graph from sentence parse results.")
    parser.add_argument(
        "--input-path",
        default="",
        help="JSON file with parse results; a built-in sample is used when omitted.",
    )
    parser.add_argument(
        "--output-path",
        default="parse_graph.json",
        help="Where to save the resulting graph JSON.",
    )
    parser.add_argument("--layout", choices=sorted(LAYOUT_STRATEGIES), help="Layout strategy.")
    parser.add_argument("--direction", choices=["TB", "LR"], help="Direction for the layered layout.")
    parser.add_argument("--parent-id", default=None, help="Attach every analysis root under this node id.")
    parser.add_argument(
        "--per-analysis",
        action="store_true",
        help="Render every analysis separately instead of consolidating them.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    overrides = {key: value for key, value in (("layout", args.layout), ("direction", args.direction)) if value}
    if overrides:
        settings = replace(settings, **overrides)

    artifact = run_pipeline(
        input_path=args.input_path,
        settings=settings,
        parent_id=args.parent_id,
        consolidate=not args.per_analysis,
    )
    output_path = Path(args.output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(artifact, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Parse graph saved to: {output_path.resolve()}")
    print(
        "Counts:",
        f"nodes={len(artifact['nodes'])}",
        f"edges={len(artifact['edges'])}",
        f"warnings={len(artifact['meta']['validation_report'].get('warnings', []))}",
    )
    return 0
