"""Unit tests for the UI-agnostic reader controller.

WHY: Every button, key and slider gesture in the GUI goes through the
controller. Testing it headless covers the interaction rules without a
display: key gating, scrub pause/resume, speed entry and preference
persistence.

HOW: A controller is built on the FakeScheduler and a PreferenceStore
under tmp_path. Preference persistence is checked by loading the store
again from disk.

RULES:
- No tkinter imports here
- The sample text segments to ["The cat", "sat on", "a", "mat."] with
  merging and to six chunks without
"""

import pytest

from rsvp_reader.controller import ReaderController
from rsvp_reader.core.ir import DisplayEvent, PlayerMode
from rsvp_reader.preferences import Preferences, PreferenceStore

TEXT = "The cat sat on a mat."


@pytest.fixture
def controller(scheduler, store, recorder):
    return ReaderController(
        scheduler,
        store,
        on_display=recorder.on_display,
        on_progress=recorder.on_progress,
    )


class TestStartup:

    def test_uses_stored_preferences(self, scheduler, store):
        store.save(Preferences(speed=350, night=True, merge=False))
        c = ReaderController(scheduler, store)
        assert c.player.rate_wpm == 350
        assert c.prefs.night is True
        c.set_text(TEXT)
        assert c.player.total == 6

    def test_defaults_without_stored_file(self, controller):
        assert controller.player.rate_wpm == 200
        assert controller.prefs == Preferences()
        assert controller.reading_view is False


class TestText:

    def test_set_text_segments_immediately(self, controller):
        controller.set_text(TEXT)
        assert [c.text for c in controller.player.sequence] == [
            "The cat", "sat on", "a", "mat.",
        ]
        assert controller.player.cursor == 0
        assert controller.prepared is False

    def test_start_reading_without_text(self, controller, scheduler):
        controller.set_text("   ")
        assert controller.start_reading() is False
        assert controller.reading_view is False
        assert scheduler.live == 0

    def test_start_reading_plays(self, controller, scheduler, recorder):
        controller.set_text(TEXT)
        assert controller.start_reading() is True
        assert controller.reading_view is True
        assert controller.player.mode is PlayerMode.RUNNING

        scheduler.fire_next()
        assert recorder.last == DisplayEvent("The cat", 1, 4)

    def test_edit_while_reading_restarts_sequence(self, controller, scheduler):
        controller.set_text(TEXT)
        controller.start_reading()
        scheduler.fire_next()

        controller.set_text("Something else entirely.")

        assert controller.player.mode is PlayerMode.IDLE
        assert controller.player.cursor == 0
        assert scheduler.live == 0
        assert controller.player.total == 3

    def test_finished_text_starts_over(self, controller, scheduler):
        controller.set_text(TEXT)
        controller.start_reading()
        while scheduler.live:
            scheduler.fire_next()
        assert controller.player.finished

        assert controller.start_reading() is True
        assert controller.player.cursor == 0
        assert controller.player.mode is PlayerMode.RUNNING

    def test_new_text_leaves_reading_view(self, controller, scheduler, recorder):
        controller.set_text(TEXT)
        controller.start_reading()
        scheduler.fire_next()

        controller.new_text()

        assert controller.reading_view is False
        assert controller.prepared is False
        assert controller.player.mode is PlayerMode.IDLE
        assert scheduler.live == 0
        assert recorder.last == DisplayEvent("", 0, 4)


class TestPlayPause:

    def test_press_start_toggles(self, controller, scheduler):
        controller.set_text(TEXT)
        controller.press_start()
        assert controller.player.is_running

        assert controller.press_start() is True
        assert controller.player.mode is PlayerMode.PAUSED
        assert scheduler.live == 0

        controller.press_start()
        assert controller.player.is_running

    def test_press_start_resumes_where_paused(self, controller, scheduler, recorder):
        controller.set_text(TEXT)
        controller.press_start()
        scheduler.fire_next()
        controller.press_start()
        controller.press_start()
        scheduler.fire_next()
        assert recorder.last == DisplayEvent("sat on", 2, 4)

    def test_toggle_key_ignored_outside_reading_view(self, controller, scheduler):
        controller.set_text(TEXT)
        controller.toggle_play()
        assert controller.player.mode is PlayerMode.IDLE
        assert scheduler.live == 0

    def test_toggle_key_in_reading_view(self, controller):
        controller.set_text(TEXT)
        controller.start_reading()
        controller.toggle_play()
        assert controller.player.mode is PlayerMode.PAUSED
        controller.toggle_play()
        assert controller.player.mode is PlayerMode.RUNNING

    def test_back_key_ignored_outside_reading_view(self, controller, recorder):
        controller.set_text(TEXT)
        controller.player.seek(3)
        shown = len(recorder.displays)
        controller.step_back()
        assert controller.player.cursor == 3
        assert len(recorder.displays) == shown

    def test_back_key_in_reading_view(self, controller, scheduler):
        controller.set_text(TEXT)
        controller.start_reading()
        scheduler.fire_next()
        scheduler.fire_next()
        controller.step_back()
        assert controller.player.cursor == 0
        assert scheduler.live == 1


class TestRate:

    def test_change_rate_persists(self, controller, store):
        assert controller.change_rate(25) is True
        assert controller.player.rate_wpm == 225
        assert store.load().speed == 225

    def test_change_rate_down(self, controller):
        controller.change_rate(-25)
        assert controller.player.rate_wpm == 175

    def test_change_rate_past_limit_rejected(self, controller, store):
        controller.player.set_rate(2000)
        assert controller.change_rate(25) is False
        assert controller.player.rate_wpm == 2000
        assert store.load().speed == 2000

    @pytest.mark.parametrize("raw,expected", [
        ("300", 300),
        (" 450 ", 450),
        ("abc", 200),
        ("", 200),
        ("0", 200),
        ("2001", 200),
        ("12.5", 200),
    ])
    def test_submit_rate(self, controller, raw, expected):
        assert controller.submit_rate(raw) == expected
        assert controller.player.rate_wpm == expected

    def test_rejected_entry_is_not_persisted(self, controller, store):
        controller.submit_rate("nope")
        assert not store.path.exists()


class TestScrub:

    def test_scrub_pauses_and_resumes(self, controller, scheduler, recorder):
        controller.set_text(TEXT)
        controller.start_reading()
        scheduler.fire_next()

        controller.begin_scrub()
        assert controller.player.mode is PlayerMode.PAUSED
        assert scheduler.live == 0

        controller.preview_scrub(3)
        assert recorder.last == DisplayEvent("a", 3, 4)
        assert controller.player.cursor == 1

        controller.end_scrub(3)
        assert controller.player.cursor == 3
        assert controller.player.mode is PlayerMode.RUNNING
        assert scheduler.live == 1

        scheduler.fire_next()
        assert recorder.last == DisplayEvent("mat.", 4, 4)

    def test_scrub_while_paused_stays_paused(self, controller, scheduler):
        controller.set_text(TEXT)
        controller.start_reading()
        controller.press_start()

        controller.begin_scrub()
        controller.end_scrub(2)

        assert controller.player.cursor == 2
        assert controller.player.mode is PlayerMode.PAUSED
        assert scheduler.live == 0


class TestPreferences:

    def test_set_merge_resegments_and_persists(self, controller, store):
        controller.set_text(TEXT)
        controller.set_merge(False)
        assert controller.player.total == 6
        assert store.load().merge is False

        controller.set_merge(True)
        assert controller.player.total == 4
        assert store.load().merge is True

    def test_set_night_persists(self, controller, store):
        controller.set_night(True)
        assert store.load().night is True
        assert controller.prefs.night is True

    def test_save_failure_does_not_raise(self, scheduler, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        c = ReaderController(scheduler, PreferenceStore(blocker / "prefs.json"))

        assert c.change_rate(25) is True
        assert c.player.rate_wpm == 225
