"""
cli_interactive.py - Interactive CLI

Provides a menu-style interactive interface
"""

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, Type, TypeVar

from ..core import (
    CaseTransform, EngineOptions, EntryKitError, EntrySession, NamePreference,
    RenameForm, RenameScope, SortKey, execute_rename, format_relative, load_source,
)

E = TypeVar("E", bound=Enum)


def clear_screen():
    """Clear screen"""
    os.system('cls' if os.name == 'nt' else 'clear')


def print_header(title: str):
    """Print header"""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def input_path(prompt: str, allow_listing: bool = False) -> Optional[Path]:
    """Ask for a directory (or, when allowed, a JSON listing file); q returns"""
    while True:
        raw = input(f"{prompt} (q to return): ").strip().strip('"')
        if raw.lower() == 'q':
            return None

        path = Path(raw).expanduser().resolve()
        if path.is_dir() or (allow_listing and path.suffix.lower() == ".json" and path.is_file()):
            return path
        print(f"Error: Not a usable {'directory or listing' if allow_listing else 'directory'}: {path}")


def input_enum(prompt: str, enum_cls: Type[E], default: E) -> Optional[E]:
    """Pick an enum member by its value; empty input keeps the default, q cancels"""
    values = [member.value for member in enum_cls]

    while True:
        value = input(f"{prompt} ({'/'.join(values)}) [{default.value}]: ").strip().lower()
        if not value:
            return default
        if value == 'q':
            return None
        if value in values:
            return enum_cls(value)
        print(f"Invalid choice, please enter one of: {', '.join(values)}")


def input_bool(prompt: str, default: bool = False) -> bool:
    """Yes/no question"""
    hint = "Y/n" if default else "y/N"
    answer = input(f"{prompt} ({hint}): ").strip().lower()
    if not answer:
        return default
    return answer in ('y', 'yes')


def load_session(source: Path) -> Optional[EntrySession]:
    """Load a directory or JSON listing into a fresh session"""
    session = EntrySession(EngineOptions.from_env())
    try:
        session.load(load_source(source))
    except EntryKitError as e:
        print(f"Error: {e}")
        return None
    if not session.records:
        print(f"No entries found in {source}")
        return None
    return session


def show_entries(session: EntrySession, limit: int = 50):
    """Print visible entries in display order"""
    visible = session.visible
    print("-" * 80)
    for i, r in enumerate(visible):
        if i >= limit:
            print(f"... and {len(visible) - limit} more files")
            break
        size_kb = r.size / 1024
        print(f"  {r.display_name(session.state.preference):<50} {size_kb:>10.1f} KB  {format_relative(r.modified_at)}")
    print("-" * 80)
    state = session.state
    print(f"Showing {len(visible)}/{len(session.records)} | sort: {state.sort_key.value} ({state.direction.value})"
          f" | query: {state.query or '(none)'}")


def menu_search():
    """Search and sort menu"""
    print_header("Search Entries")

    source = input_path("Directory or JSON listing", allow_listing=True)
    if source is None:
        return

    session = load_session(source)
    if session is None:
        input("Press Enter to return...")
        return

    sort_map = {"1": SortKey.NAME, "2": SortKey.SIZE, "3": SortKey.MODIFIED, "4": SortKey.REASON}

    while True:
        show_entries(session)
        print()
        print("  /text  Filter by title, AniList id/URL or TMDB URL ('/' alone clears)")
        print("  1-4    Sort by name / size / modified / reason (again to flip)")
        print("  t      Switch displayed titles")
        print("  q      Return")
        choice = input("> ").strip()

        if choice.lower() == 'q':
            return
        if choice.startswith('/'):
            session.on_query_changed(choice[1:].strip())
        elif choice in sort_map:
            session.on_header_clicked(sort_map[choice])
        elif choice.lower() == 't':
            preference = input_enum("Titles", NamePreference, session.state.preference)
            if preference is not None:
                session.on_preference_changed(preference)
        else:
            print("Invalid choice")


def menu_rename():
    """Rename files menu"""
    print_header("Rename Files")

    directory = input_path("Directory holding the files")
    if directory is None:
        return

    session = load_session(directory)
    if session is None:
        input("Press Enter to return...")
        return

    query = input("Only files matching (leave empty for all): ").strip()
    if query:
        session.on_query_changed(query)
    session.select_all_visible()

    selected = session.selected_names()
    if not selected:
        print("No matching files found")
        input("Press Enter to return...")
        return
    print(f"Selected {len(selected)} files")

    while True:
        search = input("\nFind (leave empty to only change case): ")
        replacement = input("Replace with (leave empty to delete): ")
        is_regex = input_bool("Regular expression", default=False)
        match_all = input_bool("Replace all occurrences", default=False)
        case_sensitive = input_bool("Case sensitive", default=False)

        scope = input_enum("Apply to", RenameScope, RenameScope.WHOLE)
        if scope is None:
            return
        case = input_enum("Case", CaseTransform, CaseTransform.NONE)
        if case is None:
            return

        form = RenameForm(
            search=search,
            replacement=replacement,
            is_regex=is_regex,
            match_all=match_all,
            case_sensitive=case_sensitive,
            scope=scope,
            case_transform=case,
        )
        plan = session.on_rule_edited(form)
        if session.pattern_error is None:
            break
        print(f"Error: {session.pattern_error}")
        if not input_bool("Try again", default=True):
            return

    # Display plan
    print(f"\nPreview ({plan.total_count} of {len(plan.entries)} files change):")
    print("-" * 70)
    for entry in plan.entries[:15]:
        renamed = entry.renamed if entry.changed else "(no change)"
        print(f"  {entry.original:<30} -> {renamed}")
    if len(plan.entries) > 15:
        print(f"  ... and {len(plan.entries) - 15} more files")
    print("-" * 70)

    for warn in plan.warnings:
        print(f"Warning: {warn}")

    if not plan.changes:
        print("No files need renaming")
        input("Press Enter to return...")
        return

    print()
    if not input_bool("Confirm execution", default=False):
        print("Cancelled")
        input("Press Enter to return...")
        return

    print("\nExecuting...")
    result = execute_rename(directory, plan)
    print()
    print(result.summary())

    input("\nPress Enter to return...")


def interactive_mode() -> int:
    """Interactive mode main loop"""
    while True:
        clear_screen()
        print_header("Entry Search and Rename Tool")

        print("Please select function:")
        print()
        print("  1. Search entries")
        print("  2. Rename files")
        print()
        print("  q. Exit")
        print()

        choice = input("Please select (1/2/q): ").strip().lower()

        if choice == 'q':
            print("Goodbye!")
            return 0
        elif choice == '1':
            menu_search()
        elif choice == '2':
            menu_rename()
        else:
            print("Invalid choice")
            input("Press Enter to continue...")


if __name__ == "__main__":
    sys.exit(interactive_mode())
