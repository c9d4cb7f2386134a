"""Console entrypoint for the Aiden SDK.

Small command-line front end over ``AidenClient``: stream a thinking chat,
ask a notebook a question, list notebooks, run a skill, or show billing.
Connection settings come from flags or ``AIDEN_*`` environment variables.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from aiden import __version__
from aiden.client import AidenClient
from aiden.config import ClientConfig, LogLevel, load_config
from aiden.errors import AidenError, RateLimitError
from aiden.logging import configure_logger, event_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aiden", description="Aiden AI platform command-line client")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}", help="Show version and exit.")
    parser.add_argument("--api-key", dest="api_key", help="API key (default: $AIDEN_API_KEY)")
    parser.add_argument("--base-url", dest="base_url", help="API base URL (default: $AIDEN_BASE_URL)")
    parser.add_argument("--user-id", dest="user_id", help="User id sent as X-User-ID")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--max-retries", dest="max_retries", type=int, help="Retries for 429/5xx responses")
    parser.add_argument("--log-level", dest="log_level", choices=[e.value for e in LogLevel], help="Log level")
    parser.add_argument("--debug", action="store_true", help="Log every request and retry to stderr")

    subparsers = parser.add_subparsers(dest="command", required=True)

    think_parser = subparsers.add_parser("think", help="Stream a thinking-chat answer")
    think_parser.add_argument("message", help="Message to send")
    think_parser.add_argument("--notebook", help="Scope the chat to a notebook id")
    think_parser.add_argument("--session", help="Continue an existing session id")
    think_parser.add_argument("--model", help="Model id override")
    think_parser.add_argument("--show-thinking", action="store_true", help="Print thinking events to stderr")

    ask_parser = subparsers.add_parser("ask", help="Ask a notebook a question (RAG)")
    ask_parser.add_argument("notebook", help="Notebook id")
    ask_parser.add_argument("question", help="Question to answer")

    notebooks_parser = subparsers.add_parser("notebooks", help="Notebook helpers")
    notebooks_sub = notebooks_parser.add_subparsers(dest="notebooks_cmd", required=True)
    list_parser = notebooks_sub.add_parser("list", help="List notebooks")
    list_parser.add_argument("--search", help="Filter by name")
    list_parser.add_argument("--page", type=int, help="Page number")
    list_parser.add_argument("--limit", type=int, help="Page size")
    list_parser.add_argument("--all", action="store_true", dest="list_all", help="Follow every page")

    skills_parser = subparsers.add_parser("skills", help="Skill helpers")
    skills_sub = skills_parser.add_subparsers(dest="skills_cmd", required=True)
    run_parser = skills_sub.add_parser("run", help="Run a skill")
    run_parser.add_argument("skill_id", help="Skill id")
    run_parser.add_argument("--input", action="append", default=[], help="key=value skill inputs")

    billing_parser = subparsers.add_parser("billing", help="Billing helpers")
    billing_sub = billing_parser.add_subparsers(dest="billing_cmd", required=True)
    billing_sub.add_parser("overview", help="Show the billing overview")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = LogLevel.DEBUG if args.debug else LogLevel(args.log_level or LogLevel.WARNING.value)
    logger = configure_logger(log_level)

    config = load_config(
        {
            "api_key": args.api_key,
            "base_url": args.base_url,
            "user_id": args.user_id,
            "timeout": args.timeout,
            "max_retries": args.max_retries,
        }
    )

    try:
        return asyncio.run(_run(args, config, event_logger(logger)))
    except RateLimitError as exc:
        print(f"error [{exc.code}] {exc.message} (retry after {exc.retry_after_ms}ms)", file=sys.stderr)
        return 1
    except AidenError as exc:
        print(f"error [{exc.code}] {exc.message} (request {exc.request_id})", file=sys.stderr)
        return 1


async def _run(args: argparse.Namespace, config: ClientConfig, hook: Any) -> int:
    async with AidenClient(config=config, logger=hook) as client:
        if args.command == "think":
            return await _run_think(client, args)
        if args.command == "ask":
            return await _run_ask(client, args)
        if args.command == "notebooks":
            return await _run_notebooks(client, args)
        if args.command == "skills":
            return await _run_skills(client, args)
        if args.command == "billing":
            return await _run_billing(client, args)
    return 1


async def _run_think(client: AidenClient, args: argparse.Namespace) -> int:
    params = {"message": args.message, "sessionId": args.session, "model": args.model}
    params = {key: value for key, value in params.items() if value is not None}
    if args.notebook:
        stream = await client.knowledge.think_in_notebook(args.notebook, params)
    else:
        stream = await client.knowledge.think(params)

    def on_thinking(event: Any) -> None:
        if args.show_thinking:
            print(f"[{event.phase}] {event.type}", file=sys.stderr)

    async with stream:
        complete = await stream.subscribe(
            on_delta=lambda content: print(content, end="", flush=True),
            on_thinking=on_thinking,
        )
    print()
    if isinstance(complete, dict) and complete.get("sessionId"):
        print(f"session: {complete['sessionId']}", file=sys.stderr)
    return 0


async def _run_ask(client: AidenClient, args: argparse.Namespace) -> int:
    response = await client.knowledge.rag_ask(args.notebook, {"question": args.question})
    data = response.data if isinstance(response.data, dict) else {}
    print(data.get("answer", ""))
    for source in data.get("sources") or []:
        if isinstance(source, dict):
            print(f"- {source.get('source')} ({source.get('score')})")
    return 0


async def _run_notebooks(client: AidenClient, args: argparse.Namespace) -> int:
    params = {"search": args.search, "page": args.page, "limit": args.limit}
    if args.list_all:
        async for notebook in client.notebooks.list_all(params):
            _print_notebook(notebook)
        return 0
    response = await client.notebooks.list(params)
    for notebook in response.data:
        _print_notebook(notebook)
    pagination = response.meta.pagination
    if pagination is not None:
        print(f"page {pagination.page}/{pagination.total_pages} ({pagination.total} total)", file=sys.stderr)
    return 0


async def _run_skills(client: AidenClient, args: argparse.Namespace) -> int:
    inputs: dict[str, str] = {}
    for pair in args.input:
        if "=" not in pair:
            raise SystemExit("--input expects key=value")
        key, value = pair.split("=", 1)
        inputs[key] = value
    response = await client.skills.run(args.skill_id, {"inputs": inputs})
    print(json.dumps(response.data, indent=2, default=str))
    return 0


async def _run_billing(client: AidenClient, args: argparse.Namespace) -> int:
    response = await client.billing.overview()
    print(json.dumps(response.data, indent=2, default=str))
    return 0


def _print_notebook(notebook: Any) -> None:
    if isinstance(notebook, dict):
        print(f"{notebook.get('_id', '?')} {notebook.get('name', '')}")
    else:
        print(notebook)


if __name__ == "__main__":
    sys.exit(main())
