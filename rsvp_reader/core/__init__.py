"""Core segmentation and playback modules.

WHY: The core package holds the only parts of the reader with real
logic — splitting text into chunks and pacing them on a timer. Every
outer layer (controller, GUI, CLI, renderers) builds on these.

HOW: ir.py defines the data structures, segmenter.py builds chunk
sequences from raw text, scheduler.py abstracts the timer, and
player.py runs the playback state machine on top of a scheduler.

RULES:
- IR dataclasses are the contract between segmenter, player and renderers
- Nothing in core imports tkinter or touches the filesystem
"""
