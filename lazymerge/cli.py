"""Command-line front door for lazymerge.

Parses CLI options, layers them over the saved config, and launches the
interactive merge UI on the chosen directory.
"""

from __future__ import annotations

import argparse
import functools
import logging
import sys
from pathlib import Path

from .logging_setup import configure_logging
from .output import OutputDestination
from .runtime import App, config, run_main_loop
from .runtime.terminal import TerminalController
from .tokens import count_tokens
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)


def _destination(value: str) -> OutputDestination:
    """argparse type for ``--destination``."""
    normalized = value.strip().lower().replace("-", "_").replace("+", "_and_")
    for destination in OutputDestination:
        if destination.value == normalized:
            return destination
    raise argparse.ArgumentTypeError(
        f"invalid destination {value!r} (choose from {', '.join(d.value for d in OutputDestination)})"
    )


def _terminal_fds() -> tuple[int, int]:
    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("lazymerge needs an interactive terminal.")
    return sys.stdin.fileno(), sys.stdout.fileno()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazymerge",
        description="Pick source files, watch their token counts, and merge them into one document.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Source directory. Defaults to current directory.")
    parser.add_argument("-o", "--output", default=None, help="Output file for the merged document.")
    parser.add_argument(
        "--destination",
        type=_destination,
        default=None,
        help="Where to send the merge: file, clipboard, or file_and_clipboard.",
    )
    parser.add_argument("--ext", action="append", default=None, metavar="EXT", help="Only list files with EXT (repeatable).")
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="GLOB",
        help="Extra gitwildmatch pattern to skip (repeatable).",
    )
    parser.add_argument("--hidden", action="store_true", default=None, help="Include dotfiles and dot-directories.")
    parser.add_argument("--no-gitignore", action="store_true", help="Do not skip git-ignored files.")
    parser.add_argument("--encoding", default=None, help="tiktoken encoding used for token counts.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write the log here instead of the user log dir.")
    parser.add_argument("--debug", action="store_true", help="Log debug messages.")
    return parser


def build_app(args: argparse.Namespace, default_path: Path) -> App:
    """Create the controller from parsed arguments and saved config."""
    filter_config = config.filter_config_from(
        extensions=args.ext,
        exclude_globs=args.exclude,
        include_hidden=args.hidden,
        respect_gitignore=False if args.no_gitignore else None,
    )
    encoding = args.encoding or config.load_token_encoding()
    theme = resolve_theme(args.theme or config.load_theme_name(), no_color=args.no_color)
    app = App(
        source_path=str(Path(args.path) if args.path else default_path),
        output_path=args.output or config.load_output_path(),
        destination=args.destination or config.load_destination(),
        filter_config=filter_config,
        count_tokens=functools.partial(count_tokens, encoding=encoding),
        theme=theme,
        on_destination_change=config.save_destination,
    )
    app.reload_files_needed = True
    return app


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and run lazymerge until the user exits.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args()
    log_path = configure_logging(args.log_file, debug=args.debug)

    if default_path is None:
        default_path = Path.cwd()
    if args.path is not None and not Path(args.path).is_dir():
        raise SystemExit(f"Not a directory: {args.path}")
    stdin_fd, stdout_fd = _terminal_fds()

    app = build_app(args, default_path)
    logger.info("starting in %s (log: %s)", app.source_path_panel.value, log_path)
    terminal = TerminalController(stdin_fd, stdout_fd)
    run_main_loop(app, terminal, stdin_fd)
    if app.status_message:
        print(app.status_message)


if __name__ == "__main__":
    main()
