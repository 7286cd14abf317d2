from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.reactive import reactive
from textual.timer import Timer
from textual.widgets import Input, Static

from .config import DURATIONS, Settings
from .metrics import TestStats
from .scoring import Verdict, WordState
from .session import SessionSnapshot, SessionStatus, TypingSession
from .words import (
    DEFAULT_VOCABULARY,
    VocabularyPool,
    load_seed_text,
    seed_word_count,
    split_completed_words,
)

logger = logging.getLogger(__name__)

THEMES: Dict[str, Dict[str, str]] = {
    "slate": {
        "card_bg": "#111827",
        "stats_bg": "#0f172a",
        "prompt_bg": "#0b1220",
        "input_bg": "#0b0f14",
        "border": "#1f2937",
        "title": "#e5e7eb",
        "muted": "#64748b",
        "hint": "#93c5fd",
        "ok": "#a7f3d0",
        "bad": "#fca5a5",
        "active_ok": "#86efac",
        "active_bad": "#fb7185",
        "active_fg": "#e5e7eb",
        "upcoming": "#cbd5e1",
        "flash": "#3f1d2a",
        "bar_fg": "#60a5fa",
        "bar_bg": "#1e293b",
    },
    "ember": {
        "card_bg": "#1f140f",
        "stats_bg": "#21140e",
        "prompt_bg": "#1a1210",
        "input_bg": "#130c0a",
        "border": "#3b1d14",
        "title": "#fef3c7",
        "muted": "#d6a08a",
        "hint": "#fbbf24",
        "ok": "#fcd34d",
        "bad": "#f87171",
        "active_ok": "#fde68a",
        "active_bad": "#fb7185",
        "active_fg": "#fde68a",
        "upcoming": "#f3e8e1",
        "flash": "#3d0f12",
        "bar_fg": "#f97316",
        "bar_bg": "#3b1d14",
    },
    "mint": {
        "card_bg": "#0b1f24",
        "stats_bg": "#0b1c22",
        "prompt_bg": "#0a1b1f",
        "input_bg": "#07161a",
        "border": "#12323a",
        "title": "#d1fae5",
        "muted": "#7dd3c7",
        "hint": "#5eead4",
        "ok": "#a7f3d0",
        "bad": "#fb7185",
        "active_ok": "#5eead4",
        "active_bad": "#fb7185",
        "active_fg": "#d1fae5",
        "upcoming": "#c7f9f1",
        "flash": "#0f2f2a",
        "bar_fg": "#34d399",
        "bar_bg": "#12323a",
    },
}

PLACEHOLDER = "Type here… (space to advance)"


# ---------------------------
# UI widgets
# ---------------------------

class StatsBar(Static):
    """Countdown, progress and live stats."""
    pass


class PromptView(Static):
    """Current line of target words."""
    pass


class ResultsBar(Static):
    """Final report once the test ends."""
    pass


class HelpBar(Static):
    pass


# ---------------------------
# App
# ---------------------------

class TypingTUI(App):
    CSS = """
    Screen {
        background: transparent;
    }

    #root {
        height: 100%;
        padding: 1 2;
    }

    StatsBar {
        background: #0f172a;
        border: round #1f2937;
        padding: 0 2;
        height: 5;
    }

    HelpBar {
        background: #0f172a;
        border: round #1f2937;
        padding: 0 2;
        height: 3;
    }

    PromptView {
        background: #0b1220;
        border: round #1f2937;
        padding: 1 2;
        height: 1fr;
    }

    ResultsBar {
        background: #111827;
        border: round #1f2937;
        padding: 0 2;
        height: 5;
    }

    Input {
        border: round #1f2937;
        background: #0b0f14;
        padding: 0 2;
        height: 3;
    }
    """

    TITLE = "typedash"
    SUB_TITLE = "timed typing practice"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("ctrl+r", "restart", "Restart", priority=True),
        # Input binds ctrl+e and ctrl+d itself
        Binding("ctrl+e", "end_test", "End", priority=True),
        Binding("ctrl+d", "cycle_duration", "Duration", priority=True),
        Binding("ctrl+t", "cycle_theme", "Theme", priority=True),
        Binding("ctrl+s", "toggle_sound", "Sound", priority=True),
    ]

    flash_error: bool = reactive(False)

    def __init__(
        self,
        settings: Optional[Settings] = None,
        seed_text: Optional[str] = None,
        vocabulary: Optional[VocabularyPool] = None,
        image: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY
        self.rng = rng or random.Random()
        self.fixed_seed_text = seed_text
        self.image = image
        self.sound = self.settings.sound
        self.duration_sec = self.settings.duration_sec

        self.palettes = THEMES.copy()
        for name, colors in self.settings.themes.items():
            self.palettes[name] = {**self.palettes["slate"], **colors}
        self.theme_name = self.settings.theme
        if self.theme_name not in self.palettes:
            self.theme_name = "slate"
        self.palette = self.palettes[self.theme_name]

        self.results: List[TestStats] = []
        self._tick_timer: Optional[Timer] = None
        self.session = self._new_session()

    def _seed_text(self) -> str:
        if self.fixed_seed_text is not None:
            return self.fixed_seed_text
        return load_seed_text(
            self.settings.text_file,
            self.vocabulary,
            seed_word_count(self.duration_sec),
            self.rng,
        )

    def _new_session(self) -> TypingSession:
        session = TypingSession(
            self._seed_text(),
            self.duration_sec,
            vocabulary=self.vocabulary,
            line_size=self.settings.line_size,
            rng=self.rng,
            image=self.image,
            on_complete=self._on_complete,
        )
        session.subscribe(self._on_keystroke)
        return session

    def compose(self) -> ComposeResult:
        with Container(id="root"):
            self.stats_bar = StatsBar()
            self.prompt_view = PromptView()
            self.input = Input(placeholder=PLACEHOLDER)
            self.results_bar = ResultsBar()
            self.help_bar = HelpBar()
            yield self.stats_bar
            yield self.prompt_view
            yield self.input
            yield self.results_bar
            yield self.help_bar

    def on_mount(self) -> None:
        self.apply_theme()
        self._render_all()
        self.input.focus()

    def apply_theme(self) -> None:
        palette = self.palette
        self.stats_bar.styles.background = palette["stats_bg"]
        self.help_bar.styles.background = palette["stats_bg"]
        self.results_bar.styles.background = palette["card_bg"]
        self.prompt_view.styles.background = palette["prompt_bg"]
        self.input.styles.background = palette["input_bg"]
        border_def = (("round", palette["border"]),)
        self.stats_bar.styles.border = border_def
        self.help_bar.styles.border = border_def
        self.results_bar.styles.border = border_def
        self.prompt_view.styles.border = border_def
        self.input.styles.border = border_def

    # ---------------------------
    # Timer
    # ---------------------------

    def _start_ticking(self) -> None:
        if self._tick_timer is not None:
            return
        generation = self.session.generation
        self._tick_timer = self.set_interval(1.0, lambda: self._tick(generation))

    def _stop_ticking(self) -> None:
        if self._tick_timer is not None:
            self._tick_timer.stop()
            self._tick_timer = None

    def _tick(self, generation: int) -> None:
        self.session.on_timer_tick(generation)
        self._render_stats()

    # ---------------------------
    # Session callbacks
    # ---------------------------

    def _on_complete(self, stats: TestStats) -> None:
        self._stop_ticking()
        self.results.append(stats)
        self.input.disabled = True
        self.input.placeholder = "Time's up. Press Ctrl+R to restart."
        self._render_all()

    def _on_keystroke(self, char: str, correct: bool) -> None:
        if correct:
            return
        self._trigger_flash()
        if self.sound:
            self.bell()

    def _trigger_flash(self) -> None:
        if self.flash_error:
            return
        self.flash_error = True
        self.prompt_view.styles.background = self.palette["flash"]
        self.set_timer(0.12, self._clear_flash)

    def _clear_flash(self) -> None:
        self.flash_error = False
        self.prompt_view.styles.background = self.palette["prompt_bg"]

    # ---------------------------
    # Actions
    # ---------------------------

    def action_restart(self) -> None:
        self._stop_ticking()
        if self.session.duration_sec == self.duration_sec and self.fixed_seed_text is not None:
            self.session.restart()
        else:
            # fresh seed text; keep counting generations so old ticks stay stale
            generation = self.session.generation + 1
            self.session = self._new_session()
            self.session.generation = generation
        self.input.disabled = False
        self.input.placeholder = PLACEHOLDER
        self.input.value = ""
        self._render_all()
        self.input.focus()

    def action_end_test(self) -> None:
        if self.session.finished:
            return
        self.session.end_test()

    def action_cycle_duration(self) -> None:
        self.duration_sec = self._cycle_value(self.duration_sec, list(DURATIONS))
        logger.info("duration set to %ds", self.duration_sec)
        self.action_restart()

    def action_cycle_theme(self) -> None:
        self.theme_name = self._cycle_value(self.theme_name, list(self.palettes.keys()))
        self.palette = self.palettes[self.theme_name]
        self.apply_theme()
        self._render_all()

    def action_toggle_sound(self) -> None:
        self.sound = not self.sound
        self._render_help()

    def _cycle_value(self, current, options: List):
        if current not in options:
            return options[0]
        idx = options.index(current)
        return options[(idx + 1) % len(options)]

    # ---------------------------
    # Input
    # ---------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        session = self.session
        if session.finished:
            return

        value = event.value
        # Each space submits the word before it (allows pasted/fluid typing)
        completed, fragment = split_completed_words(value)
        for word in completed:
            session.on_input_change(word)
            session.on_submit_word()
            if session.finished:
                break
        session.on_input_change(fragment)

        if session.status is SessionStatus.RUNNING:
            self._start_ticking()
        # Keep only the fragment in the input box
        if value != fragment:
            self.input.value = fragment

        self._render_prompt()
        self._render_stats()

    # ---------------------------
    # Rendering
    # ---------------------------

    def _render_all(self) -> None:
        self._render_stats()
        self._render_prompt()
        self._render_results()
        self._render_help()

    def _render_stats(self) -> None:
        snap = self.session.snapshot()
        theme = self.palette
        duration = self.session.duration_sec
        elapsed = duration - snap.remaining_seconds
        progress = elapsed / float(duration)
        bar_len = 34
        filled = int(bar_len * min(1.0, max(0.0, progress)))

        text = Text()
        text.append("Time ", style=theme["muted"])
        text.append(
            f"{snap.remaining_seconds // 60:02d}:{snap.remaining_seconds % 60:02d}",
            style=f"bold {theme['title']}",
        )
        text.append(" / ", style=theme["muted"])
        text.append(f"{duration // 60:02d}:{duration % 60:02d}", style=theme["muted"])
        text.append("  ", style=theme["muted"])
        text.append(f"{int(progress * 100):>3}%", style=theme["bar_fg"])
        text.append("\n", style="")
        text.append("[", style=theme["muted"])
        if filled:
            text.append("=" * filled, style=theme["bar_fg"])
        if bar_len - filled:
            text.append("." * (bar_len - filled), style=theme["bar_bg"])
        text.append("]", style=theme["muted"])
        text.append("\n", style="")
        text.append("WPM ", style=theme["muted"])
        text.append(f"{snap.wpm:>4}", style=f"bold {theme['title']}")
        text.append("   ", style=theme["muted"])
        text.append("Acc ", style=theme["muted"])
        text.append(f"{snap.accuracy:>3}%", style=f"bold {theme['title']}")
        if snap.image:
            text.append("   ", style=theme["muted"])
            text.append(snap.image, style=theme["muted"])
        self.stats_bar.update(text)

    def _render_prompt(self) -> None:
        snap = self.session.snapshot()
        self.prompt_view.update(render_line(snap, self.palette))

    def _render_results(self) -> None:
        theme = self.palette
        text = Text()
        stats = self.session.stats
        if stats is None:
            text.append("Results appear here when the timer runs out.", style=theme["muted"])
        else:
            text.append(f"{stats.wpm} wpm", style=f"bold {theme['title']}")
            text.append("  ", style=theme["muted"])
            text.append(f"{stats.accuracy}% acc", style=theme["upcoming"])
            text.append("\n", style="")
            text.append(
                f"{stats.correct_chars} correct / {stats.incorrect_chars} incorrect"
                f" / {stats.total_chars} chars in {stats.elapsed_seconds}s",
                style=theme["muted"],
            )
        if len(self.results) > 1:
            best = max(self.results, key=lambda s: (s.wpm, s.accuracy))
            text.append("\n", style="")
            text.append(f"Best this run: {best.wpm} wpm, {best.accuracy}% acc", style=theme["muted"])
        self.results_bar.update(text)

    def _render_help(self) -> None:
        theme = self.palette
        text = Text()
        status = self.session.status
        if status is SessionStatus.IDLE:
            text.append("Start typing to begin. ", style=theme["hint"])
        elif status is SessionStatus.ENDED:
            text.append("Time's up. ", style=theme["hint"])
        text.append("Ctrl+R restart", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append("Ctrl+E end", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append(f"Ctrl+D {self.duration_sec}s", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append(f"Ctrl+T {self.theme_name}", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append(f"Ctrl+S sound {'on' if self.sound else 'off'}", style=theme["hint"])
        text.append("  ", style=theme["muted"])
        text.append("Ctrl+Q quit", style=theme["hint"])
        self.help_bar.update(text)


def render_line(snap: SessionSnapshot, theme: Dict[str, str]) -> Text:
    """Styled current line: done words, the word in progress with cursor, upcoming words."""
    text = Text()
    for word, state in zip(snap.line, snap.word_states):
        if state is WordState.COMPLETED_CORRECT:
            text.append(word, style=f"bold {theme['ok']}")
        elif state is WordState.COMPLETED_INCORRECT:
            text.append(word, style=f"bold {theme['bad']} underline")
        elif state is WordState.CURRENT:
            typed = snap.current_input
            for i, ch in enumerate(word):
                if i < len(typed):
                    ok = snap.verdicts[i] is Verdict.CORRECT
                    style = theme["active_ok"] if ok else theme["active_bad"]
                    text.append(ch, style=f"bold {style} underline")
                elif i == len(typed):
                    text.append(ch, style=f"reverse {theme['active_fg']}")
                else:
                    text.append(ch, style=f"{theme['active_fg']} underline")
            extra = typed[len(word):]
            if extra:
                text.append(extra, style=f"bold {theme['active_bad']} strike")
        else:
            text.append(word, style=theme["upcoming"])
        text.append(" ", style="")
    return text
