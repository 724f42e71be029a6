#!/usr/bin/env python3
"""fast-kit CLI entrypoint."""

import sys
import logging
import argparse

import yaml

from fastkit.lib.config import load_config
from fastkit.lib.constants import EXPORT_FORMATS, SPEC_FORMATS, SPEC_SOURCES, SPEC_STATUSES, SPEC_TEMPLATES
from fastkit.lib.envparse import EnvSyntaxError
from fastkit.tools import Toolbox
from fastkit.commands import init as cmd_init_module
from fastkit.commands import prompts as cmd_prompts_module
from fastkit.commands import specs as cmd_specs_module


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='fk', description='fast-kit prompt and spec CLI')
    parser.add_argument('--home', help='Storage root (default: $FAST_KIT_HOME or ~/.fast-kit)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging to stderr')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # fk init
    p_init = subparsers.add_parser('init', help='Create storage layout and seed built-in prompts')
    p_init.set_defaults(func=cmd_init_module.cmd_init)

    # fk prompts ...
    p_prompts = subparsers.add_parser('prompts', help='Prompt templates')
    prompts_sub = p_prompts.add_subparsers(dest='prompts_command', required=True)

    p_list = prompts_sub.add_parser('list', help='List prompts')
    p_list.add_argument('--category', '-c', help='Filter by category')
    p_list.add_argument('--tag', '-t', action='append', help='Filter by tag (repeatable, any match)')
    p_list.add_argument('--search', '-s', help='Substring of name or description')
    p_list.add_argument('--limit', '-n', type=int, help='Maximum number of prompts')
    p_list.set_defaults(func=cmd_prompts_module.cmd_prompts_list)

    p_show = prompts_sub.add_parser('show', help='Show a prompt with usage stats')
    p_show.add_argument('id', help='Prompt ID')
    p_show.add_argument('--examples', action='store_true', help='Include examples')
    p_show.set_defaults(func=cmd_prompts_module.cmd_prompts_show)

    p_compose = prompts_sub.add_parser('compose', help='Render a prompt with variables')
    p_compose.add_argument('id', help='Prompt ID')
    p_compose.add_argument('--var', action='append', metavar='NAME=VALUE', help='String variable (repeatable)')
    p_compose.add_argument('--vars-file', help='YAML/JSON file of typed variables')
    p_compose.add_argument('--inject-context', action='store_true', help='Expose provider context to the template')
    p_compose.set_defaults(func=cmd_prompts_module.cmd_prompts_compose)

    p_search = prompts_sub.add_parser('search', help='Keyword search')
    p_search.add_argument('query', help='Search keywords')
    p_search.add_argument('--limit', '-n', type=int, help='Maximum number of results')
    p_search.set_defaults(func=cmd_prompts_module.cmd_prompts_search)

    p_create = prompts_sub.add_parser('create', help='Create a custom prompt')
    p_create.add_argument('name', help='Prompt name')
    p_create.add_argument('--category', '-c', required=True, help='Category')
    p_create.add_argument('--template-file', '-f', required=True, help='File holding the Jinja2 template')
    p_create.add_argument('--description', '-d', help='Short description')
    p_create.add_argument('--variables-file', help='YAML/JSON list of variable definitions')
    p_create.add_argument('--tag', '-t', action='append', help='Tag (repeatable)')
    p_create.set_defaults(func=cmd_prompts_module.cmd_prompts_create)

    p_track = prompts_sub.add_parser('track', help='Record a prompt use')
    p_track.add_argument('id', help='Prompt ID')
    p_track.add_argument('--failure', action='store_true', help='Record an unsuccessful use')
    p_track.add_argument('--feedback', help='Free-form feedback')
    p_track.add_argument('--time-ms', type=float, help='Completion time in milliseconds')
    p_track.add_argument('--tokens', type=int, help='Token count')
    p_track.set_defaults(func=cmd_prompts_module.cmd_prompts_track)

    # fk specs ...
    p_specs = subparsers.add_parser('specs', help='Specifications')
    specs_sub = p_specs.add_subparsers(dest='specs_command', required=True)

    p_new = specs_sub.add_parser('new', help='Create a draft spec')
    p_new.add_argument('template', choices=SPEC_TEMPLATES, help='Spec template')
    p_new.add_argument('title', help='Spec title')
    p_new.add_argument('--data-file', help='YAML/JSON file with initial content')
    p_new.add_argument('--source', choices=SPEC_SOURCES, default='manual', help='Where the content came from')
    p_new.add_argument('--description', '-d', help='Short description')
    p_new.add_argument('--tag', '-t', action='append', help='Tag (repeatable)')
    p_new.add_argument('--author', help='Author')
    p_new.add_argument('--strict', action='store_true', help='Refuse content that fails the schema')
    p_new.set_defaults(func=cmd_specs_module.cmd_specs_new)

    p_sshow = specs_sub.add_parser('show', help='Show a spec')
    p_sshow.add_argument('id', help='Spec ID')
    p_sshow.add_argument('--format', choices=SPEC_FORMATS, default='yaml', help='Output format')
    p_sshow.set_defaults(func=cmd_specs_module.cmd_specs_show)

    p_slist = specs_sub.add_parser('list', help='List specs')
    p_slist.add_argument('--template', choices=SPEC_TEMPLATES, help='Filter by template')
    p_slist.add_argument('--status', choices=SPEC_STATUSES, help='Filter by status')
    p_slist.add_argument('--tag', '-t', action='append', help='Filter by tag (repeatable, any match)')
    p_slist.add_argument('--search', '-s', help='Substring of title or description')
    p_slist.add_argument('--limit', '-n', type=int, help='Maximum number of specs')
    p_slist.set_defaults(func=cmd_specs_module.cmd_specs_list)

    p_ssearch = specs_sub.add_parser('search', help='Keyword search')
    p_ssearch.add_argument('query', help='Search keywords')
    p_ssearch.add_argument('--limit', '-n', type=int, help='Maximum number of results')
    p_ssearch.set_defaults(func=cmd_specs_module.cmd_specs_search)

    p_validate = specs_sub.add_parser('validate', help='Validate a spec against its schema')
    p_validate.add_argument('id', help='Spec ID')
    p_validate.add_argument('--strict', action='store_true', help='Treat warnings as errors')
    p_validate.set_defaults(func=cmd_specs_module.cmd_specs_validate)

    p_export = specs_sub.add_parser('export', help='Export a spec')
    p_export.add_argument('id', help='Spec ID')
    p_export.add_argument('--format', '-f', choices=EXPORT_FORMATS, default='markdown', help='Export format')
    p_export.add_argument('--context', action='store_true', help='Include a details section (prompt format)')
    p_export.set_defaults(func=cmd_specs_module.cmd_specs_export)

    p_templates = specs_sub.add_parser('templates', help='List spec templates')
    p_templates.set_defaults(func=cmd_specs_module.cmd_specs_templates)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        config = load_config(home=args.home)
    except EnvSyntaxError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    toolbox = Toolbox(config)
    if args.func is not cmd_init_module.cmd_init:
        toolbox.initialize()
    try:
        return args.func(args, toolbox)
    except (OSError, yaml.YAMLError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
