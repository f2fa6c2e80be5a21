from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from .config import AgentConfig, load_agent_config
from .errors import TemplateNotFoundError
from .execution.tracker import TaskExecutionTracker
from .logging_utils import configure_logging, pretty, summarize_execution
from .storage.container import AgentContainer


def _load_config(args: argparse.Namespace) -> AgentConfig:
    config_file = Path(args.config_file).expanduser() if args.config_file else None
    config = load_agent_config(config_file)
    if args.log_level:
        config.log_level = args.log_level.upper()
    configure_logging(config.log_level)
    return config


def _parse_params(pairs: list[str]) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        try:
            params[key] = json.loads(value)
        except json.JSONDecodeError:
            params[key] = value
    return params


def _server(args: argparse.Namespace) -> int:
    import uvicorn

    from .server import create_app

    config = _load_config(args)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=config.log_level.lower())
    return 0


def _templates(args: argparse.Namespace) -> int:
    config = _load_config(args)
    container = AgentContainer(config)
    templates = container.store.templates_for(container.user_id)
    if args.json:
        sys.stdout.write(json.dumps({"templates": [t.to_dict() for t in templates]}, indent=2) + "\n")
        return 0

    table = Table(title="Task templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Steps", justify="right")
    for template in templates:
        table.add_row(template.id, template.name, template.category, str(len(template.steps)))
    Console().print(table)
    return 0


async def _run_execution(
    container: AgentContainer,
    template_id: str,
    parameters: dict[str, Any],
    console: Console,
) -> Optional[Any]:
    tracker = TaskExecutionTracker(container.store, container.bus, step_delay=container.config.step_delay_seconds)

    def _on_event(event: dict[str, Any]) -> None:
        if event["type"] == "execution.progress":
            payload = event["payload"]
            console.print(f"[{payload['progress']:>3}%] step {payload['step']}/{payload['total']}: {payload['label']}")

    unsubscribe = container.bus.subscribe(_on_event)
    try:
        execution = await tracker.start_by_id(template_id, user_id=container.user_id, parameters=parameters)
        return await tracker.join(execution.id)
    finally:
        unsubscribe()
        await tracker.shutdown()


def _execute(args: argparse.Namespace) -> int:
    config = _load_config(args)
    if args.step_delay is not None:
        config.step_delay_seconds = max(args.step_delay, 0.0)
    try:
        parameters = _parse_params(args.param or [])
    except ValueError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 2

    container = AgentContainer(config)
    console = Console()
    try:
        execution = asyncio.run(_run_execution(container, args.template_id, parameters, console))
    except TemplateNotFoundError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    if execution is None:
        sys.stderr.write(f"Execution of {args.template_id} produced no record\n")
        return 1
    console.print(pretty(summarize_execution(execution)))
    return 0 if execution.status == "completed" else 1


def _show_config(args: argparse.Namespace) -> int:
    config = _load_config(args)
    sys.stdout.write(json.dumps(config.to_dict(redact=True), indent=2, sort_keys=True) + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Voice browser agent backend")
    parser.add_argument("--config-file", default=None, help="YAML settings file (default: $AGENT_CONFIG_FILE)")
    parser.add_argument("--log-level", default=None, help="Override AGENT_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    server = subparsers.add_parser("server", help="Start the dashboard API server")
    server.add_argument("--host", default="127.0.0.1")
    server.add_argument("--port", default=5000, type=int)
    server.set_defaults(func=_server)

    templates = subparsers.add_parser("templates", help="List the demo user's task templates")
    templates.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    templates.set_defaults(func=_templates)

    execute = subparsers.add_parser("execute", help="Run a task template in the foreground")
    execute.add_argument("template_id")
    execute.add_argument("--param", action="append", metavar="KEY=VALUE", help="Execution parameter (repeatable)")
    execute.add_argument("--step-delay", type=float, default=None, help="Seconds per simulated step")
    execute.set_defaults(func=_execute)

    config = subparsers.add_parser("config", help="Show the resolved configuration (secrets redacted)")
    config.set_defaults(func=_show_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == "__main__":
    raise SystemExit(main())
