#!/usr/bin/env python3
"""
Entry Kit - Launcher

Starts the desktop window unless --cli/-c is given, in which case the
remaining arguments go to the command-line interface.

Usage:
    python main.py                         # GUI
    python main.py --cli                   # interactive menu
    python main.py -c search listing.json -q titan
    python main.py -c rename ./subs --search "[Group]" --scope base
"""

import sys
from typing import List, Optional

CLI_FLAGS = ("--cli", "-c")


def _split_mode(argv: List[str]):
    """Return (cli_requested, remaining args); only a leading flag selects the CLI"""
    if argv and argv[0] in CLI_FLAGS:
        return True, argv[1:]
    return False, argv


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    cli_requested, rest = _split_mode(sys.argv[1:] if argv is None else list(argv))

    if cli_requested:
        from entrykit.cli import main as cli_main
        return cli_main(rest)

    try:
        from entrykit.gui import main as gui_main
    except ImportError as e:
        print(f"Error: the desktop window needs PySide6 ({e})")
        print("Install it with: pip install PySide6")
        print("or use the command line instead: python main.py --cli")
        return 1
    return gui_main()


if __name__ == "__main__":
    sys.exit(main())
