"""Command-line interface for the RSVP reader.

WHY: Reading a file in the terminal is the quickest way to use the
engine, and dumping the chunk sequence is the quickest way to see what
the segmenter does with a given text. The CLI wires text input,
segmentation, playback and a terminal renderer behind one command.

HOW: argparse accepts an input file (or stdin), a rate, the merge toggle
and a preference file. Stored preferences supply the defaults; flags
override them for this run only and are never written back. Playback
runs on a BlockingScheduler in the main thread until the last chunk has
been shown. Status messages go to stderr.

RULES:
- Positional argument: input text file, "-" or omitted for stdin
- --chunks prints one chunk per line ("*" marks a sentence end) and exits
- --wpm is validated like any rate change (exit 2 when rejected)
- Missing or unreadable input file → exit 1; Ctrl-C → exit 130
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rsvp_reader.config import LOG_LEVEL, MAX_SPEED, preferences_path
from rsvp_reader.core.ir import ChunkSequence
from rsvp_reader.core.player import Player, is_valid_rate
from rsvp_reader.core.scheduler import BlockingScheduler
from rsvp_reader.core.segmenter import segment
from rsvp_reader.preferences import PreferenceStore
from rsvp_reader.renderers import RENDERERS

_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Chunk output owns stdout (it may be piped with --chunks).

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: bool) -> None:
    level_name = LOG_LEVEL or ("INFO" if verbose else "WARNING")
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=_LOG_FORMAT,
    )


def _read_text(input_file: Optional[str]) -> str:
    """Read the text to display from a file path or stdin."""
    if input_file is None or input_file == "-":
        return sys.stdin.read()

    path = Path(input_file)
    if not path.is_file():
        _status("Error: File not found: {}".format(path))
        sys.exit(1)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _status("Error: Could not read {}: {}".format(path, exc))
        sys.exit(1)


def _print_chunks(chunks: ChunkSequence) -> None:
    for chunk in chunks:
        print("{}{}".format(chunk.text, " *" if chunk.sentence_end else ""))


def _play(chunks: ChunkSequence, wpm: int, renderer_key: str) -> None:
    """Show the chunks in the terminal until the sequence is finished."""
    renderer = RENDERERS[renderer_key]()
    scheduler = BlockingScheduler()
    player = Player(scheduler, rate_wpm=wpm, on_display=renderer.render)
    player.load(chunks)

    if not player.play():
        _status("Nothing to read.")
        return

    _status("Reading {} chunks at {} wpm (Ctrl-C to stop)".format(len(chunks), wpm))
    try:
        scheduler.run()
    except KeyboardInterrupt:
        scheduler.stop()
        renderer.finish()
        _status("Stopped at chunk {}/{}.".format(player.cursor, player.total))
        sys.exit(130)

    renderer.finish()
    _status("Done!")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    RULES:
    - Positional: input_file (optional, "-" for stdin)
    - Optional: --wpm, --merge/--no-merge, --chunks, --prefs-file,
      --renderer, --verbose
    """
    parser = argparse.ArgumentParser(
        prog="rsvp_reader",
        description="Speed-read a text file one chunk at a time (RSVP).",
    )

    parser.add_argument(
        "input_file",
        nargs="?",
        default=None,
        help="Text file to read. Reads stdin when omitted or '-'.",
    )

    parser.add_argument(
        "--wpm",
        type=int,
        default=None,
        help="Reading rate in words per minute, 1-{} "
             "(default: stored preference).".format(MAX_SPEED),
    )

    parser.add_argument(
        "--merge",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Merge short words into the previous chunk "
             "(default: stored preference).",
    )

    parser.add_argument(
        "--chunks",
        action="store_true",
        help="Print the chunk sequence, one per line, and exit.",
    )

    parser.add_argument(
        "--prefs-file",
        default=None,
        help="Preference file to read defaults from "
             "(default: $RSVP_PREFS_PATH or ~/.rsvp_reader/prefs.json).",
    )

    parser.add_argument(
        "--renderer",
        default="plain_text",
        choices=sorted(RENDERERS.keys()),
        help="Display renderer (default: %(default)s).",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at INFO level.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    store = PreferenceStore(args.prefs_file or preferences_path())
    prefs = store.load()

    wpm = prefs.speed if args.wpm is None else args.wpm
    if not is_valid_rate(wpm):
        _status("Error: --wpm must be between 1 and {}.".format(MAX_SPEED))
        sys.exit(2)
    merge = prefs.merge if args.merge is None else args.merge

    chunks = segment(_read_text(args.input_file), merge)

    if args.chunks:
        _print_chunks(chunks)
        return

    _play(chunks, wpm, args.renderer)


if __name__ == "__main__":
    main()
