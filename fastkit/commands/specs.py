"""
fk specs - Specification commands.
"""

import sys

from fastkit.commands.output import print_error, print_result, read_data_file, truncate
from fastkit.tools import Toolbox


def cmd_specs_new(args, toolbox: Toolbox) -> int:
    """Create a spec, optionally seeded from a YAML/JSON data file."""
    arguments = {
        "template": args.template,
        "title": args.title,
        "source": args.source,
        "strict": args.strict,
    }
    if args.data_file:
        data = read_data_file(args.data_file)
        if not isinstance(data, dict):
            print(f"ERROR: {args.data_file} must contain a mapping", file=sys.stderr)
            return 1
        arguments["data"] = data
    if args.description:
        arguments["description"] = args.description
    if args.tag:
        arguments["tags"] = args.tag
    if args.author:
        arguments["author"] = args.author

    result = toolbox.call("create_spec", arguments)
    if result.is_error:
        return print_error(result)

    payload = result.payload
    print(f"Created: {payload['spec_id']} ({payload['template']}, {payload['validation_status']})")
    for issue in payload["validation_errors"]:
        print(f"  - {issue['path']}: {issue['message']}")
    return 0


def cmd_specs_show(args, toolbox: Toolbox) -> int:
    return print_result(toolbox.call("get_spec", {"spec_id": args.id, "format": args.format}))


def cmd_specs_list(args, toolbox: Toolbox) -> int:
    result = toolbox.call("list_specs", {
        k: v for k, v in {
            "template": args.template,
            "status": args.status,
            "tags": args.tag,
            "search": args.search,
            "limit": args.limit,
        }.items() if v
    })
    if result.is_error:
        return print_error(result)

    payload = result.payload
    if not payload["specs"]:
        print("Specs: none")
        print()
        print("Get started:")
        print("  fk specs templates          - See available templates")
        print("  fk specs new prd 'My PRD'   - Create a draft spec")
        return 0

    print("Specs")
    print("-" * 72)
    for s in payload["specs"]:
        print(f"  {s['spec_id']:<12} {s['template']:<11} {s['status']:<11} {truncate(s['title'], 34)}")
    print()
    more = " (more available, raise --limit)" if payload["has_more"] else ""
    print(f"{payload['total']} spec(s){more}")
    for path in payload["skipped"]:
        print(f"  [WARN] Skipped unreadable file: {path}")
    return 0


def cmd_specs_search(args, toolbox: Toolbox) -> int:
    arguments = {"query": args.query}
    if args.limit:
        arguments["limit"] = args.limit
    result = toolbox.call("search_specs", arguments)
    if result.is_error:
        return print_error(result)

    results = result.payload["results"]
    if not results:
        print(f"No specs match '{args.query}'")
        return 0
    for r in results:
        s = r["spec"]
        print(f"  {r['relevance']:>5.2f}  {s['spec_id']:<12} {truncate(s['title'], 34):<34} {r['matching_reason']}")
    return 0


def cmd_specs_validate(args, toolbox: Toolbox) -> int:
    """Print the validation report. Exit 1 only when the spec is found invalid."""
    result = toolbox.call("validate_spec", {"spec_id": args.id, "strict": args.strict})
    code = print_result(result)
    if code == 0 and result.payload.get("valid") is False:
        return 1
    return code


def cmd_specs_export(args, toolbox: Toolbox) -> int:
    return print_result(toolbox.call("export_spec", {
        "spec_id": args.id,
        "format": args.format,
        "include_context": args.context,
    }))


def cmd_specs_templates(args, toolbox: Toolbox) -> int:
    result = toolbox.call("list_templates")
    if result.is_error:
        return print_error(result)
    for t in result.payload["templates"]:
        print(f"  {t['id']:<11} {t['name']:<32} schema: {t['schema_status']}")
    return 0
