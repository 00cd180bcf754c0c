#!/usr/bin/env python3
"""
tcr-tasks entry point: full-screen editor plus headless export/tcr commands.

The task file is loaded before anything else; a file that exists but cannot
be parsed stops the program with exit status 1 and a message on stderr.
"""

import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version as pkg_version
from pathlib import Path
from typing import List, Optional

import config
from core import ParseError, PersistenceError, TcrError
from application.tcr import TcrAction, TcrOrchestrator, commit_message_for
from infrastructure.exporters import ExportFormat
from infrastructure.file_repository import FileTaskRepository
from infrastructure.git_vcs import GitVersionControl
from infrastructure.process_runner import SubprocessTestRunner
from interface.cli_parser import build_parser as build_cli_parser
from interface.session import EditSession
from interface.tui_app import run_tui
from interface.tui_themes import DEFAULT_THEME, THEMES

logger = logging.getLogger("tcr_tasks")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_TCR_ERROR = 2
EXIT_USAGE = 2


def setup_logging(headless: bool) -> None:
    """File logging when TCR_TASKS_LOG_FILE is set; stderr only for headless runs."""
    level_name = os.getenv("TCR_TASKS_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger("tcr_tasks")
    root.handlers.clear()
    root.propagate = False
    log_file = os.getenv("TCR_TASKS_LOG_FILE")
    if log_file:
        handler: logging.Handler = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
        root.setLevel(level)
    elif headless:
        handler = logging.StreamHandler(sys.stderr)
        root.setLevel(logging.WARNING)
    else:
        # the full-screen UI owns the terminal
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def _repository(args) -> FileTaskRepository:
    return FileTaskRepository(Path(args.file) if getattr(args, "file", None) else None)


def _orchestrator(repository: FileTaskRepository, args, *, capture_output: bool) -> TcrOrchestrator:
    workdir = repository.task_file.resolve().parent
    override = (getattr(args, "test_command", None) or "").strip()
    return TcrOrchestrator(
        repository=repository,
        runner=SubprocessTestRunner(cwd=workdir, capture_output=capture_output),
        vcs=GitVersionControl(workdir),
        command=override or config.get_test_command(),
    )


def open_session(args, *, background_tcr: bool = True) -> EditSession:
    """Load the task file and wire the session to the real adapters.

    Raises ParseError when the task file exists but is malformed.
    """
    repository = _repository(args)
    store = repository.load()
    return EditSession(
        store,
        repository,
        _orchestrator(repository, args, capture_output=True),
        background_tcr=background_tcr,
        on_test_command_changed=config.set_test_command,
    )


def cmd_tui(args) -> int:
    session = open_session(args, background_tcr=True)
    return run_tui(session, theme=getattr(args, "theme", DEFAULT_THEME))


def cmd_export(args) -> int:
    repository = _repository(args)
    store = repository.load()
    formats: List[ExportFormat] = list(ExportFormat) if args.format == "all" else [ExportFormat.from_string(args.format)]
    if args.output and len(formats) > 1:
        print("Error: --output needs a single --format (md or json)", file=sys.stderr)
        return EXIT_USAGE
    try:
        for fmt in formats:
            print(repository.export(store, Path(args.output) if args.output else None, fmt))
    except PersistenceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED
    return EXIT_OK


def cmd_tcr(args) -> int:
    repository = _repository(args)
    store = repository.load()
    tcr = _orchestrator(repository, args, capture_output=False)
    message = (getattr(args, "message", None) or "").strip() or commit_message_for(None)
    try:
        record = tcr.run(store, commit_message=message)
    except (PersistenceError, TcrError) as exc:
        print(f"TCR error: {exc}", file=sys.stderr)
        return EXIT_TCR_ERROR
    if record.action_taken is TcrAction.COMMITTED:
        print(f"tests passed: committed \"{record.commit_message}\"")
        return EXIT_OK
    print(f"tests failed (exit {record.exit_status}): working tree reverted", file=sys.stderr)
    return EXIT_FAILED


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    return build_cli_parser(commands=sys.modules[__name__], themes=THEMES, default_theme=DEFAULT_THEME)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "version", False):
        try:
            print(pkg_version("tcr-tasks"))
        except PackageNotFoundError:
            print("0.0.0")
        return EXIT_OK
    setup_logging(headless=args.command in ("export", "tcr"))
    logger.info("tcr-tasks %s started", args.command or "tui")
    try:
        return args.func(args)
    except ParseError as exc:
        print(f"Cannot read task file: {exc}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
