#!/usr/bin/env python3
"""
PocketPM CLI — inspect and maintain saved conversation history.

Every command has a primary name and short aliases:

    COMMAND         ALIASES         WHAT IT DOES
    -------         -------         ----------------------------------
    serve           start, up       Start the history API server
    list            ls              List a user's conversations
    search          find            Search titles, previews and categories
    show            get             Show one conversation with its transcript
    delete          rm              Delete one conversation
    regenerate      regen           Recompute titles, previews and insights
    clear           wipe            Delete a user's whole history
    export          dump            Export conversations to JSON
    stats           info            Per-category counts
"""

import argparse
import json
import logging
import sys

from pocketpm import __version__


def _default_user() -> str:
    from pocketpm.config import get_config
    return get_config().get("history", {}).get("default_user", "default")


def _repository():
    from pocketpm.config import get_config
    from pocketpm.repository import ConversationRepository
    return ConversationRepository.from_config(get_config())


def _print_records(records):
    from pocketpm.reporting import format_relative_date

    if not records:
        print("  (no conversations)")
        return
    for r in records:
        print(f"  {r.id[:12]}  {format_relative_date(r.date):<14} [{r.category}] {r.title}")
        print(f"      {r.preview}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_serve(args):
    """Start the history API server."""
    import uvicorn
    from pocketpm.config import get_config

    cfg = get_config()
    host = args.host or cfg["server"]["host"]
    port = args.port or cfg["server"]["port"]

    print(f"  PocketPM history v{__version__} on {host}:{port}")
    print(f"  Storage: {cfg['storage']['backend']}")
    print()

    uvicorn.run(
        "pocketpm.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level="info",
    )


def cmd_list(args):
    repo = _repository()
    records = repo.get_conversations_by_category(args.category, args.user)
    _print_records(records)


def cmd_search(args):
    repo = _repository()
    query = " ".join(args.query)
    records = repo.search_conversations(query, args.user)
    print(f"  {len(records)} match(es) for '{query}'")
    _print_records(records)


def cmd_show(args):
    repo = _repository()
    record = repo.get_conversation(args.id, args.user)
    if record is None:
        print(f"  ✗ No conversation {args.id} for user {args.user}")
        sys.exit(1)

    print(f"  {record.title}")
    print(f"  Category: {record.category}   Date: {record.date}")
    print(f"  Preview:  {record.preview}")
    print(f"  Insight:  {record.analysis}")
    print()
    for m in record.messages:
        who = "you" if m.is_user else " ai"
        print(f"  {who}> {m.text}")


def cmd_delete(args):
    repo = _repository()
    before = len(repo.get_conversations(args.user))
    remaining = repo.delete_conversation(args.id, args.user)
    if len(remaining) == before:
        print(f"  ✗ No conversation {args.id} for user {args.user}")
        sys.exit(1)
    print(f"  ✓ Deleted {args.id} ({len(remaining)} remaining)")


def cmd_regenerate(args):
    repo = _repository()
    records = repo.regenerate_conversation_data(args.user)
    print(f"  ✓ Regenerated {len(records)} conversation(s)")
    _print_records(records)


def cmd_clear(args):
    if not args.yes:
        answer = input(f"  Delete ALL conversations for '{args.user}'? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            print("  Aborted.")
            return
    _repository().clear_all_conversations(args.user)
    print(f"  ✓ Cleared history for {args.user}")


def cmd_export(args):
    from pocketpm.reporting import export_conversations

    repo = _repository()
    data = export_conversations(repo.get_conversations(args.user))
    indent = 2 if args.pretty else None
    if args.output == "-":
        print(json.dumps(data, indent=indent, ensure_ascii=False))
        return
    with open(args.output, "w") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
    print(f"  ✓ Exported {len(data)} conversation(s) to {args.output}")


def cmd_stats(args):
    from pocketpm.reporting import category_counts

    counts = category_counts(_repository().get_conversations(args.user))
    for name, count in counts.items():
        print(f"  {name:<18} {count}")


# ---------------------------------------------------------------------------
# Parser with aliases
# ---------------------------------------------------------------------------

def _add_command(subparsers, names, help_text, func, setup_fn=None):
    """Register a command under multiple names."""
    p = subparsers.add_parser(names[0], help=help_text, aliases=names[1:])
    p.set_defaults(func=func)
    p.add_argument("--user", "-u", default=None,
                   help="User id (default: history.default_user from config)")
    if setup_fn:
        setup_fn(p)
    return p


def build_parser() -> argparse.ArgumentParser:
    from pocketpm.metadata import ALL_CATEGORIES, CATEGORY_FILTERS

    parser = argparse.ArgumentParser(
        prog="pocketpm",
        description="PocketPM — conversation history tools.",
        epilog="Run 'pocketpm <command> --help' for command-specific options.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V", action="version",
        version=f"pocketpm {__version__}",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", metavar="<command>")

    def setup_serve(p):
        p.add_argument("--host", default=None, help="Override listen host")
        p.add_argument("--port", "-p", type=int, default=None, help="Override listen port")
        p.add_argument("--reload", action="store_true", help="Auto-reload on code changes (dev)")

    _add_command(sub, ["serve", "start", "up"],
                 "Start the history API server", cmd_serve, setup_serve)

    def setup_list(p):
        p.add_argument("--category", "-c", choices=CATEGORY_FILTERS, default=ALL_CATEGORIES,
                       help="Only show one category")

    _add_command(sub, ["list", "ls"], "List conversations", cmd_list, setup_list)

    def setup_search(p):
        p.add_argument("query", nargs="+", help="Search text")

    _add_command(sub, ["search", "find"],
                 "Search titles, previews and categories", cmd_search, setup_search)

    def setup_id(p):
        p.add_argument("id", help="Conversation id")

    _add_command(sub, ["show", "get"], "Show one conversation", cmd_show, setup_id)
    _add_command(sub, ["delete", "rm"], "Delete one conversation", cmd_delete, setup_id)

    _add_command(sub, ["regenerate", "regen"],
                 "Recompute titles, previews and insights", cmd_regenerate)

    def setup_clear(p):
        p.add_argument("--yes", "-y", action="store_true", help="Don't ask for confirmation")

    _add_command(sub, ["clear", "wipe"], "Delete a user's whole history", cmd_clear, setup_clear)

    def setup_export(p):
        p.add_argument("--output", "-o", default="conversations_export.json",
                       help="Output file ('-' for stdout)")
        p.add_argument("--pretty", action="store_true", help="Pretty-print JSON")

    _add_command(sub, ["export", "dump"], "Export conversations to JSON", cmd_export, setup_export)

    _add_command(sub, ["stats", "info"], "Per-category counts", cmd_stats)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    if args.user is None:
        args.user = _default_user()

    args.func(args)


if __name__ == "__main__":
    main()
