"""Tkinter desktop GUI for the RSVP reader.

WHY: Most people want to paste text into a box and press a button, not
run a command. The GUI is that box plus the reading screen, the speed
control and the progress slider.

HOW: A single ReaderApp class builds the window in two views: INPUT
(text box) and READING (big chunk label, progress slider). All widget
callbacks translate into ReaderController calls; the controller's player
runs on a TkScheduler so ticks are delivered by the tkinter main loop
through .after(). The player's display events go to a LabelRenderer and
its progress updates refresh the counter, the slider and the button.

RULES:
- tkinter widgets are ONLY touched from the main thread (no threads here)
- Keys: P/space play-pause, Right/Left +/-25 wpm, B back 10 chunks
- Keys are ignored while the text box or the speed box has focus
- The merge checkbox is disabled while the reading view is shown
- A rejected speed entry is reverted to the current rate
"""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Dict, Optional

from rsvp_reader.config import MAX_SPEED, SPEED_STEP, preferences_path
from rsvp_reader.controller import ReaderController
from rsvp_reader.core.ir import DisplayEvent, ProgressUpdate
from rsvp_reader.core.scheduler import Scheduler
from rsvp_reader.preferences import PreferenceStore
from rsvp_reader.renderers.base import BaseRenderer
from rsvp_reader.renderers.plain_text import typeset_math

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE = "RSVP Reader"
_WINDOW_MIN_WIDTH = 640
_WINDOW_MIN_HEIGHT = 420
_PAD = 8

_CHUNK_FONT = ("TkDefaultFont", 32, "bold")

# (background, foreground) per theme
_THEMES: Dict[bool, tuple] = {
    False: ("#ffffff", "#222222"),
    True: ("#1e1e1e", "#dddddd"),
}

# spinbox arrows step through multiples of SPEED_STEP; typed entries are
# validated separately against MIN_SPEED..MAX_SPEED
_SPIN_FROM = SPEED_STEP
_SPIN_TO = MAX_SPEED

_READ_LABEL = "Read!"
_PAUSE_LABEL = "Pause"


# ---------------------------------------------------------------------------
# Tk adapters
# ---------------------------------------------------------------------------

class TkScheduler(Scheduler):
    """Scheduler backed by the tkinter event loop.

    RULES:
    - Delays are rounded to whole milliseconds (Tk's resolution)
    - Cancelling a stale after-id is ignored (TclError logged at debug)
    """

    def __init__(self, widget: tk.Misc) -> None:
        self._widget = widget

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> str:
        return self._widget.after(max(0, int(round(delay_ms))), callback)

    def cancel(self, handle: Any) -> None:
        if handle is None:
            return
        try:
            self._widget.after_cancel(handle)
        except tk.TclError:
            logger.debug("Ignoring cancel of stale after-id %s", handle)


class LabelRenderer(BaseRenderer):
    """Shows chunks in a tk.Label; math spans become Unicode text."""

    def __init__(self, label: tk.Label) -> None:
        self._label = label

    @property
    def name(self) -> str:
        return "Tk Label"

    def typeset(self, text: str) -> str:
        return typeset_math(text)

    def escape(self, text: str) -> str:
        # a Label shows text literally
        return text

    def show(self, content: str, event: DisplayEvent) -> None:
        self._label.configure(text=content)

    def clear(self, event: DisplayEvent) -> None:
        self._label.configure(text="")


# ---------------------------------------------------------------------------
# Main GUI Application
# ---------------------------------------------------------------------------

class ReaderApp:
    """Main tkinter application for the RSVP reader.

    WHY: Provides the paste-and-read workflow as a desktop window.

    HOW: Builds both views once and swaps them with pack/pack_forget.
    State lives in the ReaderController; the app only mirrors it into
    widgets.

    RULES:
    - Every user gesture goes through self._controller
    - _refresh_controls() runs after every gesture and progress update
    """

    def __init__(self, root: tk.Tk, store: Optional[PreferenceStore] = None) -> None:
        self._root = root
        self._root.title(_WINDOW_TITLE)
        self._root.minsize(_WINDOW_MIN_WIDTH, _WINDOW_MIN_HEIGHT)

        self._scrubbing = False

        # Build UI
        self._build_ui()
        self._renderer = LabelRenderer(self._chunk_label)

        self._controller = ReaderController(
            TkScheduler(self._root),
            store or PreferenceStore(preferences_path()),
            on_display=self._renderer.render,
            on_progress=self._on_progress,
        )

        self._apply_preferences()
        self._controller.set_text(self._get_text())
        self._bind_keys()
        self._root.protocol("WM_DELETE_WINDOW", self._on_close)

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        """Build the main window layout."""
        main = ttk.Frame(self._root, padding=_PAD)
        main.pack(fill=tk.BOTH, expand=True)

        # --- Controls ---
        controls = ttk.Frame(main)
        controls.pack(fill=tk.X, pady=(0, _PAD))

        self._start_btn = ttk.Button(
            controls, text=_READ_LABEL, command=self._on_start
        )
        self._start_btn.pack(side=tk.LEFT)

        self._new_btn = ttk.Button(
            controls, text="New text", command=self._on_new_text
        )
        self._new_btn.pack(side=tk.LEFT, padx=(_PAD, 0))
        self._new_btn.pack_forget()  # Hidden until reading

        ttk.Label(controls, text="Speed (wpm):").pack(side=tk.LEFT, padx=(16, 4))
        self._speed_var = tk.StringVar()
        self._speed_spin = ttk.Spinbox(
            controls,
            from_=_SPIN_FROM,
            to=_SPIN_TO,
            increment=SPEED_STEP,
            textvariable=self._speed_var,
            width=6,
            command=self._on_speed_submit,
        )
        self._speed_spin.pack(side=tk.LEFT)
        self._speed_spin.bind("<Return>", self._on_speed_submit)
        self._speed_spin.bind("<FocusOut>", self._on_speed_submit)

        self._merge_var = tk.BooleanVar()
        self._merge_check = ttk.Checkbutton(
            controls,
            text="Merge short words",
            variable=self._merge_var,
            command=self._on_merge_toggle,
        )
        self._merge_check.pack(side=tk.LEFT, padx=(16, 0))

        self._night_var = tk.BooleanVar()
        ttk.Checkbutton(
            controls,
            text="Night mode",
            variable=self._night_var,
            command=self._on_night_toggle,
        ).pack(side=tk.LEFT, padx=(_PAD, 0))

        self._progress_label = ttk.Label(controls, text="0 / 0")
        self._progress_label.pack(side=tk.RIGHT)

        # --- Input view ---
        self._input_frame = ttk.Frame(main)
        self._input_frame.pack(fill=tk.BOTH, expand=True)

        self._text_box = tk.Text(
            self._input_frame,
            wrap=tk.WORD,
            font=("TkDefaultFont", 12),
            undo=True,
        )
        scrollbar = ttk.Scrollbar(
            self._input_frame, orient=tk.VERTICAL, command=self._text_box.yview
        )
        self._text_box.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self._text_box.pack(fill=tk.BOTH, expand=True)
        self._text_box.bind("<<Modified>>", self._on_text_modified)

        # --- Reading view ---
        self._reading_frame = ttk.Frame(main)

        self._chunk_label = tk.Label(
            self._reading_frame, text="", font=_CHUNK_FONT, anchor=tk.CENTER
        )
        self._chunk_label.pack(fill=tk.BOTH, expand=True)

        self._progress_var = tk.DoubleVar(value=0)
        self._progress_scale = ttk.Scale(
            self._reading_frame,
            from_=0,
            to=1,
            orient=tk.HORIZONTAL,
            variable=self._progress_var,
            command=self._on_scrub_move,
        )
        self._progress_scale.pack(fill=tk.X, pady=(_PAD, 0))
        self._progress_scale.bind("<ButtonPress-1>", self._on_scrub_start)
        self._progress_scale.bind("<ButtonRelease-1>", self._on_scrub_end)

    def _bind_keys(self) -> None:
        self._root.bind("<KeyRelease>", self._on_key)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def _show_reading_view(self) -> None:
        self._input_frame.pack_forget()
        self._reading_frame.pack(fill=tk.BOTH, expand=True)
        self._new_btn.pack(side=tk.LEFT, padx=(_PAD, 0))
        self._merge_check.configure(state=tk.DISABLED)
        self._root.focus_set()

    def _show_input_view(self) -> None:
        self._reading_frame.pack_forget()
        self._input_frame.pack(fill=tk.BOTH, expand=True)
        self._new_btn.pack_forget()
        self._merge_check.configure(state=tk.NORMAL)

    def _refresh_controls(self) -> None:
        running = self._controller.player.is_running
        self._start_btn.configure(text=_PAUSE_LABEL if running else _READ_LABEL)

    def _apply_preferences(self) -> None:
        prefs = self._controller.prefs
        self._speed_var.set(str(prefs.speed))
        self._merge_var.set(prefs.merge)
        self._night_var.set(prefs.night)
        self._apply_theme(prefs.night)

    def _apply_theme(self, night: bool) -> None:
        background, foreground = _THEMES[night]
        self._chunk_label.configure(background=background, foreground=foreground)
        self._text_box.configure(
            background=background,
            foreground=foreground,
            insertbackground=foreground,
        )

    # ------------------------------------------------------------------
    # Player events
    # ------------------------------------------------------------------

    def _on_progress(self, update: ProgressUpdate) -> None:
        self._progress_label.configure(
            text="{} / {}".format(update.current, update.total)
        )
        self._progress_scale.configure(to=max(1, update.total))
        if not self._scrubbing:
            self._progress_var.set(update.current)
        self._refresh_controls()

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def _get_text(self) -> str:
        return self._text_box.get("1.0", "end-1c")

    def _on_text_modified(self, event: Optional[tk.Event] = None) -> None:
        if not self._text_box.edit_modified():
            return
        self._text_box.edit_modified(False)
        self._controller.set_text(self._get_text())

    def _on_start(self) -> None:
        self._controller.press_start()
        if self._controller.reading_view:
            self._show_reading_view()
        self._refresh_controls()

    def _on_new_text(self) -> None:
        self._controller.new_text()
        self._show_input_view()
        self._refresh_controls()

    def _on_speed_submit(self, event: Optional[tk.Event] = None) -> None:
        shown = self._controller.submit_rate(self._speed_var.get())
        self._speed_var.set(str(shown))

    def _change_speed(self, delta: int) -> None:
        self._controller.change_rate(delta)
        self._speed_var.set(str(self._controller.player.rate_wpm))

    def _on_merge_toggle(self) -> None:
        self._controller.set_merge(self._merge_var.get())

    def _on_night_toggle(self) -> None:
        night = self._night_var.get()
        self._controller.set_night(night)
        self._apply_theme(night)

    def _on_scrub_start(self, event: Optional[tk.Event] = None) -> None:
        self._scrubbing = True
        self._controller.begin_scrub()
        self._refresh_controls()

    def _on_scrub_move(self, value: str) -> None:
        if self._scrubbing:
            self._controller.preview_scrub(int(round(float(value))))

    def _on_scrub_end(self, event: Optional[tk.Event] = None) -> None:
        self._scrubbing = False
        self._controller.end_scrub(int(round(self._progress_var.get())))
        self._refresh_controls()

    def _on_key(self, event: tk.Event) -> None:
        if self._root.focus_get() in (self._text_box, self._speed_spin):
            return

        key = event.keysym.lower()
        if key in ("p", "space"):
            self._controller.toggle_play()
        elif key == "right":
            self._change_speed(SPEED_STEP)
        elif key == "left":
            self._change_speed(-SPEED_STEP)
        elif key == "b":
            self._controller.step_back()
        self._refresh_controls()

    def _on_close(self) -> None:
        self._controller.player.pause()
        self._root.destroy()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Launch the Tkinter GUI application.

    RULES:
    - This function blocks until the window is closed
    - Must be called from the main thread
    """
    root = tk.Tk()
    ReaderApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
