"""
fk prompts - Prompt template commands.
"""

import sys
from pathlib import Path

from fastkit.commands.output import print_error, print_result, read_data_file, truncate
from fastkit.tools import Toolbox


def _parse_vars(pairs: list[str] | None) -> dict:
    values = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'")
        values[key] = value
    return values


def cmd_prompts_list(args, toolbox: Toolbox) -> int:
    """List prompts as a table."""
    result = toolbox.call("list_prompts", {
        k: v for k, v in {
            "category": args.category,
            "tags": args.tag,
            "search": args.search,
            "limit": args.limit,
        }.items() if v
    })
    if result.is_error:
        return print_error(result)

    payload = result.payload
    if not payload["prompts"]:
        print("Prompts: none")
        return 0

    print("Prompts")
    print("-" * 72)
    for p in payload["prompts"]:
        print(f"  {p['id']:<28} {p['category']:<16} {truncate(p['name'], 26)}")
    print()
    more = " (more available, raise --limit)" if payload["has_more"] else ""
    print(f"{payload['total']} prompt(s){more}")
    for path in payload["skipped"]:
        print(f"  [WARN] Skipped unreadable file: {path}")
    return 0


def cmd_prompts_show(args, toolbox: Toolbox) -> int:
    return print_result(toolbox.call("get_prompt", {
        "prompt_id": args.id,
        "include_examples": args.examples,
    }))


def cmd_prompts_compose(args, toolbox: Toolbox) -> int:
    """Render a prompt. Rendered text goes to stdout, token estimate to stderr."""
    variables = {}
    if args.vars_file:
        data = read_data_file(args.vars_file)
        if not isinstance(data, dict):
            print(f"ERROR: {args.vars_file} must contain a mapping", file=sys.stderr)
            return 1
        variables.update(data)
    try:
        variables.update(_parse_vars(args.var))
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    result = toolbox.call("compose_prompt", {
        "prompt_id": args.id,
        "variables": variables,
        "inject_context": args.inject_context,
    })
    if result.is_error:
        return print_error(result)

    print(result.payload["rendered_prompt"], end="")
    print(f"[~{result.payload['token_count']} tokens]", file=sys.stderr)
    return 0


def cmd_prompts_search(args, toolbox: Toolbox) -> int:
    arguments = {"query": args.query}
    if args.limit:
        arguments["limit"] = args.limit
    result = toolbox.call("search_prompts", arguments)
    if result.is_error:
        return print_error(result)

    results = result.payload["results"]
    if not results:
        print(f"No prompts match '{args.query}'")
        return 0
    for r in results:
        p = r["prompt"]
        print(f"  {r['relevance']:>5.2f}  {p['id']:<28} {truncate(p['name'], 28):<28} {r['matching_reason']}")
    return 0


def cmd_prompts_create(args, toolbox: Toolbox) -> int:
    arguments = {
        "name": args.name,
        "category": args.category,
        "description": args.description or "",
        "template": Path(args.template_file).read_text(),
    }
    if args.variables_file:
        arguments["variables"] = read_data_file(args.variables_file)
    if args.tag:
        arguments["tags"] = args.tag

    result = toolbox.call("create_custom_prompt", arguments)
    if result.is_error:
        return print_error(result)

    print(f"Created: {result.payload['prompt_id']}")
    for warning in result.payload.get("warnings", []):
        print(f"  [WARN] {warning}")
    return 0


def cmd_prompts_track(args, toolbox: Toolbox) -> int:
    arguments = {"prompt_id": args.id, "success": not args.failure}
    if args.feedback:
        arguments["feedback"] = args.feedback
    if args.time_ms is not None:
        arguments["completion_time_ms"] = args.time_ms
    if args.tokens is not None:
        arguments["token_count"] = args.tokens
    return print_result(toolbox.call("track_usage", arguments))
