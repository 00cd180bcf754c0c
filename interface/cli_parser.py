"""CLI parser construction for tcr-tasks CLI/TUI."""

import argparse
from typing import Any, Mapping


def build_parser(commands: Any, themes: Mapping[str, Any], default_theme: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tcr-tasks",
        description="tcr-tasks: terminal task list with a Test-Commit-Revert workflow",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--file", "-f", dest="file", help="task file (default: ./tasks.md)")
    parser.add_argument(
        "--test-command",
        dest="test_command",
        help="command run by TCR (overrides config and TCR_TASKS_TEST_COMMAND for this run)",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.set_defaults(func=commands.cmd_tui, theme=default_theme)

    sub = parser.add_subparsers(dest="command", help="Commands")

    # tui
    tui_p = sub.add_parser("tui", help="Open the full-screen editor (default)")
    tui_p.add_argument("--theme", choices=list(themes.keys()), default=default_theme, help="color palette")
    tui_p.set_defaults(func=commands.cmd_tui)

    # export
    ep = sub.add_parser("export", help="Write a Markdown and/or JSON snapshot of the task list")
    ep.add_argument("--format", dest="format", choices=["md", "markdown", "json", "all"], default="all")
    ep.add_argument("--output", "-o", help="target file (single format only)")
    ep.set_defaults(func=commands.cmd_export)

    # tcr
    tp = sub.add_parser("tcr", help="Run tests once, then commit on success or revert on failure")
    tp.add_argument("--message", "-m", help="commit message (default: \"TCR: tests passed\")")
    tp.set_defaults(func=commands.cmd_tcr)

    return parser
