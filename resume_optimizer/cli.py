"""CLI - run the resume optimization pipeline from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from .agents import get_descriptor
from .config import AppConfig, load_config
from .documents import is_supported
from .errors import ConfigurationError
from .factory import build_resume_pipeline
from .observability import PipelineObserver, configure_logging
from .pipeline import PipelineResult
from .providers.service import CompletionClient, CompletionService

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-optimizer",
        description="Resume Optimizer - critique, align and prepare a resume for a target job",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the full pipeline on a resume and a job description")
    run.add_argument("--resume", "-r", required=True, help="Resume file (.pdf, .docx, .txt, .md)")
    run.add_argument("--job", "-j", required=True, help="Job description file (.pdf, .docx, .txt, .md)")
    run.add_argument("--config", "-c", default=argparse.SUPPRESS, help="Path to configuration file")
    run.add_argument("--json", action="store_true", help="Print the full result as JSON")
    run.add_argument("--approve", action="store_true", help="Ask for approval after the critique stage")
    run.add_argument("--verbose", "-v", action="store_true", help="Log each stage as it runs")

    sub.add_parser("info", help="Show the configured pipeline stages and timeouts")
    return parser


def build_source(resume_path: Path, job_path: Path) -> dict:
    """Decide the tagged input variant once, from the file extensions."""
    if resume_path.suffix.lower() in (".txt", ".md") and job_path.suffix.lower() in (".txt", ".md"):
        return {
            "kind": "text",
            "resume_text": resume_path.read_text(encoding="utf-8"),
            "job_description_text": job_path.read_text(encoding="utf-8"),
        }
    return {
        "kind": "file",
        "resume_data": resume_path.read_bytes(),
        "resume_filename": resume_path.name,
        "job_description_data": job_path.read_bytes(),
        "job_description_filename": job_path.name,
    }


def console_approver(value: Any) -> bool:
    critique = value.get("critique", {}) if isinstance(value, dict) else {}
    summary = (
        f"Structure score: {critique.get('structure_score', '?')}\n"
        f"ATS compatibility: {critique.get('ats_compatibility', '?')}\n"
        f"Issues found: {len(critique.get('issues', []))}"
    )
    console.print(Panel(summary, title="Critique ready for review"))
    return Confirm.ask("Continue with content analysis and job alignment?", default=True)


def render_trace(result: PipelineResult) -> Table:
    table = Table(title="Pipeline stages")
    table.add_column("#", justify="right")
    table.add_column("Agent")
    table.add_column("Status")
    table.add_column("Duration", justify="right")
    for index, stage in enumerate(result.stages, start=1):
        status = "[green]ok[/green]" if stage.success else f"[red]{stage.error.kind.value}[/red]"
        table.add_row(str(index), stage.agent_name, status, f"{stage.duration_ms}ms")
    return table


def render_result(result: PipelineResult) -> None:
    console.print(render_trace(result))
    if not result.success:
        error = result.error
        lines: List[str] = [error.describe()]
        lines.extend(f"  {issue.path}: {issue.message}" for issue in error.validation_errors)
        console.print(Panel(Text("\n".join(lines)), title="Pipeline failed", style="red"))
        return

    data = result.data
    alignment = data["alignment"]
    console.print(
        Panel(
            f"Overall fit: {alignment['overall_fit']:.0f}/100\n"
            f"Missing keywords: {', '.join(alignment['missing_keywords']) or 'none'}",
            title=f"Alignment with {data['job_description']['title']}",
        )
    )
    questions = "\n".join(f"- {q['question']}" for q in data["interview_prep"]["questions"])
    console.print(Panel(questions, title="Interview preparation"))
    console.print(f"[dim]Completed in {result.total_duration_ms}ms[/dim]")


def _completion_for(config: AppConfig, observer: PipelineObserver) -> CompletionClient:
    return CompletionService.from_settings(config.llm, observer=observer)


def cmd_run(args: argparse.Namespace, config: AppConfig) -> int:
    resume_path, job_path = Path(args.resume), Path(args.job)
    for path in (resume_path, job_path):
        if not path.exists():
            console.print(f"File not found: {path}", style="red")
            return 2
        if not is_supported(path.name):
            console.print(f"Unsupported file format: {path.name}", style="red")
            return 2

    if args.approve:
        config = config.model_copy(
            update={"pipeline": config.pipeline.model_copy(update={"require_approval": True})}
        )

    observer = PipelineObserver(verbose=args.verbose)
    try:
        completion = _completion_for(config, observer)
    except ValueError as e:
        console.print(str(e), style="red", markup=False)
        return 2

    pipeline = build_resume_pipeline(config, completion, approver=console_approver)
    result = asyncio.run(pipeline.run(build_source(resume_path, job_path), observer=observer))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        render_result(result)
    return 0 if result.success else 1


def cmd_info(config: AppConfig) -> int:
    # agents do not touch the completion client until they execute
    pipeline = build_resume_pipeline(config, completion=None, approver=console_approver)
    table = Table(title="Resume pipeline")
    table.add_column("#", justify="right")
    table.add_column("Stage")
    table.add_column("Version")
    table.add_column("Timeout", justify="right")
    for index, agent in enumerate(pipeline.agents, start=1):
        info = get_descriptor(agent)
        table.add_row(str(index), info["name"], info["version"], f"{pipeline.timeout_for(agent)}ms")
    console.print(table)

    summary = pipeline.info()
    console.print(
        f"{summary['agent_count']} stages | default timeout {summary['timeout_ms']}ms | "
        f"model {config.llm.provider}/{config.llm.model}"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        console.print(str(e), style="red", markup=False)
        for issue in e.issues:
            console.print(f"  {issue.path}: {issue.message}", style="red", markup=False)
        return 2

    configure_logging(config.logging)

    if args.command == "info":
        return cmd_info(config)
    return cmd_run(args, config)


if __name__ == "__main__":
    sys.exit(main())
