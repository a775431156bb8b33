"""
cli_entry.py - CLI Entry Point

Supports:
- Command-line argument mode
- Interactive mode
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core import (
    CaseTransform, EngineOptions, EntryKitError, EntrySession, NamePreference,
    RenameForm, RenameScope, ScoredRecord, SortDirection, SortKey,
    execute_rename, format_relative, load_source, scan_directory, use_user_collation,
)
from .cli_interactive import interactive_mode

SORT_CHOICES = [k.value for k in SortKey]
SCOPE_CHOICES = [s.value for s in RenameScope]
CASE_CHOICES = [c.value for c in CaseTransform]
PREFER_CHOICES = [p.value for p in NamePreference]


def setup_logging(verbose: bool) -> None:
    """Console logging; debug output with --verbose"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="entrykit",
        description="Entry Search and Batch Rename Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  entrykit-cli

  # Fuzzy search a directory
  entrykit-cli search ./subs --query "shingeki"

  # Search a JSON listing by AniList id
  entrykit-cli search listing.json --query https://anilist.co/anime/16498

  # Replace text in the base name of every .srt file
  entrykit-cli rename ./subs --search "[Group] " --replace "" --scope base --dry-run
"""
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    # search subcommand
    search_parser = subparsers.add_parser("search", help="Filter and sort a listing")
    search_parser.add_argument("source", type=str, help="Directory or JSON listing file")
    search_parser.add_argument("--query", "-q", type=str, default="", help="Title, AniList id/URL or TMDB URL")
    search_parser.add_argument("--sort", type=str, default=None, choices=SORT_CHOICES, help="Sort column")
    search_parser.add_argument("--descending", "-r", action="store_true", help="Sort descending")
    search_parser.add_argument("--prefer", type=str, default=None, choices=PREFER_CHOICES, help="Displayed title")
    search_parser.add_argument("--all", "-a", action="store_true", help="Also list hidden (non-matching) entries")

    # rename subcommand
    rename_parser = subparsers.add_parser("rename", help="Preview and apply a rename rule")
    rename_parser.add_argument("directory", type=str, help="Directory holding the files")
    rename_parser.add_argument("--select", "-s", nargs="*", default=None, help="Files to rename (default: all)")
    rename_parser.add_argument("--query", "-q", type=str, default="", help="Only rename files matching this query")
    rename_parser.add_argument("--search", type=str, default="", help="Text or pattern to find")
    rename_parser.add_argument("--replace", type=str, default="", help="Replacement text")
    rename_parser.add_argument("--regex", "-e", action="store_true", help="Treat --search as a regular expression")
    rename_parser.add_argument("--match-all", "-g", action="store_true", help="Replace every occurrence")
    rename_parser.add_argument("--case-sensitive", "-c", action="store_true", help="Case-sensitive matching")
    rename_parser.add_argument("--scope", type=str, default="whole", choices=SCOPE_CHOICES, help="Part of the name to change")
    rename_parser.add_argument("--case", type=str, default="none", choices=CASE_CHOICES, help="Case transform")
    rename_parser.add_argument("--json", action="store_true", help="Print the rename request body and exit")
    rename_parser.add_argument("--dry-run", "-d", action="store_true", help="Preview only, do not execute")
    rename_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")

    return parser


def _options_from_args(args) -> EngineOptions:
    options = EngineOptions.from_env()
    if getattr(args, "sort", None):
        options.sort_by = SortKey(args.sort)
    if getattr(args, "descending", False):
        options.sort_order = SortDirection.DESCENDING
    if getattr(args, "prefer", None):
        options.preferred_name = NamePreference(args.prefer)
    return options


def print_listing(scored: List[ScoredRecord], preference: NamePreference, show_hidden: bool = False) -> None:
    """Print a listing table"""
    print("-" * 80)
    for s in scored:
        if not s.visible and not show_hidden:
            continue
        r = s.record
        marker = " " if s.visible else "x"
        size_kb = r.size / 1024
        print(f"{marker} {r.display_name(preference):<50} {size_kb:>10.1f} KB  {format_relative(r.modified_at)}")
    print("-" * 80)


def cmd_search(args) -> int:
    """Handle search command"""
    session = EntrySession(_options_from_args(args))
    try:
        session.load(load_source(Path(args.source)))
    except EntryKitError as e:
        print(f"Error: {e}")
        return 1

    scored = session.on_query_changed(args.query)
    visible = [s for s in scored if s.visible]

    print(f"Source: {args.source}")
    print(f"Query: {args.query or '(all)'}")
    print(f"Sort: {session.state.sort_key.value} ({session.state.direction.value})")
    print()

    if not visible:
        print("No matching entries found")
        if not args.all:
            return 0

    print(f"Found {len(visible)} of {len(scored)} entries:")
    print_listing(scored, session.state.preference, show_hidden=args.all)
    return 0


def cmd_rename(args) -> int:
    """Handle rename command"""
    directory = Path(args.directory).resolve()
    session = EntrySession(_options_from_args(args))
    try:
        session.load(scan_directory(directory))
    except EntryKitError as e:
        print(f"Error: {e}")
        return 1

    if args.query:
        session.on_query_changed(args.query)
    if args.select is None:
        session.select_all_visible()
    else:
        session.select(args.select)

    if not session.selected_names():
        print("No files selected")
        return 0

    form = RenameForm(
        search=args.search,
        replacement=args.replace,
        is_regex=args.regex,
        match_all=args.match_all,
        case_sensitive=args.case_sensitive,
        scope=RenameScope(args.scope),
        case_transform=CaseTransform(args.case),
    )
    plan = session.on_rule_edited(form)
    if session.pattern_error is not None:
        print(f"Error: {session.pattern_error}")
        return 1

    if args.json:
        print(json.dumps(plan.to_payload(), ensure_ascii=False, indent=2))
        return 0

    # Show preview
    print(f"Preview for {len(plan.entries)} selected files:")
    print("-" * 80)
    for entry in plan.entries[:20]:
        renamed = entry.renamed if entry.changed else "(no change)"
        print(f"  {entry.original:<40} -> {renamed}")
    if len(plan.entries) > 20:
        print(f"  ... and {len(plan.entries) - 20} more files")
    print("-" * 80)

    if plan.warnings:
        print("Warnings:")
        for warn in plan.warnings:
            print(f"  - {warn}")

    if not plan.changes:
        print("No files need renaming")
        return 0

    print(f"Will perform {plan.total_count} rename operations")

    if args.dry_run:
        print("\n[Preview mode] Will not actually execute")
        return 0

    if not args.yes:
        confirm = input("\nConfirm execution? (y/N): ").strip().lower()
        if confirm != 'y':
            print("Cancelled")
            return 0

    print("\nExecuting...")
    result = execute_rename(directory, plan)
    print(result.summary())

    return 0 if result.failed_count == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    use_user_collation()

    if args.command is None:
        # No subcommand, enter interactive mode
        return interactive_mode()

    # Handle subcommands
    if args.command == "search":
        return cmd_search(args)
    elif args.command == "rename":
        return cmd_rename(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
