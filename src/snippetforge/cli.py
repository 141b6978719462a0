"""Command-line interface."""

from __future__ import annotations

import argparse
import json
from typing import Any
from uuid import uuid4

from snippetforge.config import Settings
from snippetforge.factory import build_model, build_sandbox_client
from snippetforge.functions import persistence_record, run_code_agent
from snippetforge.state import RunRequest
from snippetforge.trace import TraceRecorder


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="snippetforge CLI")
    parser.add_argument("prompt", type=str, help="What the agent should build")
    parser.add_argument("--project-id", dest="project_id", default="local")
    parser.add_argument("--run-id", dest="run_id")
    parser.add_argument("--base-url", dest="base_url")
    parser.add_argument("--api-key", dest="api_key")
    parser.add_argument("--model", dest="model")
    parser.add_argument("--template", dest="template")
    parser.add_argument("--max-iterations", type=int, dest="max_iterations")
    parser.add_argument("--workspace", dest="workspace")
    parser.add_argument("--trace", action="store_true", dest="trace")
    parser.add_argument("--sequential-tools", action="store_true", dest="sequential_tools")
    parser.add_argument("--mock", action="store_true", dest="mock")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    data: dict[str, Any] = settings.model_dump()
    if args.base_url:
        data["openai_base_url"] = args.base_url
    if args.api_key:
        data["openai_api_key"] = args.api_key
    if args.model:
        data["openai_model"] = args.model
    if args.template:
        data["sandbox_template"] = args.template
    if args.max_iterations:
        data["max_iterations"] = args.max_iterations
    if args.workspace:
        data["workspace_dir"] = args.workspace
    if args.sequential_tools:
        data["parallel_tool_calls"] = False
    return Settings(**data)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = apply_overrides(Settings(), args)
    request = RunRequest(
        run_id=args.run_id or uuid4().hex,
        value=args.prompt,
        project_id=args.project_id,
    )
    trace = None
    if args.trace:
        trace = TraceRecorder(trace_id=request.run_id, workspace_dir=settings.workspace_dir)
    run = run_code_agent(
        request,
        model=build_model(settings, use_mock=args.mock),
        sandbox_client=build_sandbox_client(settings, use_mock=args.mock),
        settings=settings,
        trace=trace,
    )
    print("Iterations:", run.iterations, f"({run.stop_reason.value})")
    if run.trace_path:
        print("Trace:", run.trace_path)
    print(json.dumps(persistence_record(run.result, request.project_id), indent=2))


if __name__ == "__main__":
    main()
