"""Flet game view: a projection of the current round snapshot."""

import asyncio
import logging
from typing import Callable

import flet as ft

from songguess.domain.model import RoundPhase, RoundSnapshot
from songguess.domain.scoring import format_time, score_band
from songguess.ui.theme import ACCENT, BAND_COLORS, BG, BG_CARD, BG_INPUT, BORDER, DANGER, FG, FG_DIM
from songguess.usecases.game_session import GameOrchestrator

logger = logging.getLogger("songguess.ui.game")

REFRESH_SECONDS = 0.1
HISTORY_ROWS = 8


class GameView(ft.Column):
    """Timer, pause-and-guess, guess inputs and result for one round at a time."""

    def __init__(
        self,
        page: ft.Page,
        orchestrator: GameOrchestrator,
        on_back: Callable[[], None] | None = None,
    ):
        super().__init__(expand=True, scroll=ft.ScrollMode.AUTO, spacing=0)
        self._page = page
        self.bgcolor = BG
        self.game = orchestrator
        self.on_back = on_back
        self._running = False
        self._last_rendered: RoundSnapshot | None = None

        self.mode_label = ft.Text("", size=12, color=FG_DIM)
        self.status_label = ft.Text("", size=13, color=FG_DIM, text_align=ft.TextAlign.CENTER)
        self.error_label = ft.Text("", size=13, color=DANGER, text_align=ft.TextAlign.CENTER, visible=False)
        self.retry_button = ft.TextButton("Retry", on_click=lambda _: self._retry(), visible=False)

        self.timer_text = ft.Text("0.0", size=40, weight=ft.FontWeight.BOLD, color=FG)
        self.timer_caption = ft.Text("seconds", size=12, color=FG_DIM)
        self.pause_button = ft.ElevatedButton(
            "Pause and Guess",
            icon=ft.Icons.PAUSE,
            on_click=lambda _: self._pause(),
            bgcolor=ACCENT,
            color="white",
            width=320,
        )

        self.title_field = ft.TextField(
            label="Track Title",
            hint_text="Enter track title...",
            bgcolor=BG_INPUT,
            color=FG,
            on_change=lambda e: self.game.round.set_guess(title=e.control.value),
            on_submit=lambda _: self._submit(),
            width=320,
        )
        self.artist_field = ft.TextField(
            label="Artist",
            hint_text="Enter artist name...",
            bgcolor=BG_INPUT,
            color=FG,
            on_change=lambda e: self.game.round.set_guess(artist=e.control.value),
            on_submit=lambda _: self._submit(),
            width=320,
        )
        self.submit_button = ft.ElevatedButton(
            "Submit Guess",
            on_click=lambda _: self._submit(),
            bgcolor=ACCENT,
            color="white",
            width=320,
        )
        self.guess_panel = ft.Column(
            [self.title_field, self.artist_field, self.submit_button],
            spacing=10,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            visible=False,
        )

        self.cover = ft.Image(src="", width=192, height=192, border_radius=8)
        self.cover_link = ft.Container(content=self.cover, url="", tooltip="Open album on Spotify", visible=False)
        self.score_text = ft.Text("", size=36, weight=ft.FontWeight.BOLD, color=FG)
        self.verdict_text = ft.Text("", size=13, color=FG_DIM)
        self.track_link = ft.TextButton("", style=ft.ButtonStyle(color=FG))
        self.artist_link = ft.TextButton("", style=ft.ButtonStyle(color=FG_DIM))
        self.result_time = ft.Text("", size=12, color=FG_DIM)
        self.result_panel = ft.Column(
            [
                self.cover_link,
                self.score_text,
                self.verdict_text,
                self.track_link,
                self.artist_link,
                self.result_time,
                ft.ElevatedButton(
                    "Play Again",
                    icon=ft.Icons.REPLAY,
                    on_click=lambda _: self._play_again(),
                    bgcolor=ACCENT,
                    color="white",
                    width=320,
                ),
            ],
            spacing=6,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            visible=False,
        )

        self.history_labels = [ft.Text("", size=11, color=FG_DIM) for _ in range(HISTORY_ROWS)]
        self.snack = ft.SnackBar(content=ft.Text(""))

        self._build_ui()
        self._refresh_display()

    def _build_ui(self):
        top_row = ft.Container(
            content=ft.Row(
                [
                    self.mode_label,
                    ft.Container(expand=True),
                    ft.TextButton("Back", on_click=lambda _: self._back(), style=ft.ButtonStyle(color=FG_DIM)),
                ],
            ),
            padding=ft.padding.symmetric(horizontal=20, vertical=8),
        )

        round_card = ft.Container(
            width=420,
            bgcolor=BG_CARD,
            border=ft.border.all(2, ACCENT),
            border_radius=8,
            padding=20,
            content=ft.Column(
                [
                    self.timer_text,
                    self.timer_caption,
                    ft.Container(height=8),
                    self.pause_button,
                    self.guess_panel,
                    self.result_panel,
                    self.status_label,
                    self.error_label,
                    self.retry_button,
                ],
                spacing=6,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
        )

        history_card = ft.Container(
            width=260,
            bgcolor=BG_CARD,
            border=ft.border.all(1, BORDER),
            border_radius=8,
            padding=10,
            content=ft.Column(
                [
                    ft.Text("Recent rounds", size=12, color=FG_DIM, weight=ft.FontWeight.BOLD),
                    ft.Container(height=4),
                    *self.history_labels,
                ],
                spacing=3,
            ),
        )

        self.controls = [
            top_row,
            ft.Container(
                content=ft.Row(
                    [round_card, history_card],
                    spacing=12,
                    wrap=True,
                    alignment=ft.MainAxisAlignment.CENTER,
                    vertical_alignment=ft.CrossAxisAlignment.START,
                ),
                padding=ft.padding.symmetric(horizontal=16, vertical=6),
            ),
            self.snack,
        ]

    # ── Rendering ───────────────────────────────────────────────────

    def _refresh_display(self):
        snap = self.game.round.snapshot()
        if self.game.is_challenge:
            total = len(self.game.challenge)
            self.mode_label.value = f"Challenge mode | Round {min(self.game.ledger.played_count + 1, total)} of {total}"
        elif self.game.playlist:
            self.mode_label.value = f"Playlist: {self.game.playlist.name}"
        else:
            self.mode_label.value = ""

        self.timer_text.value = format_time(snap.elapsed_seconds)
        in_round = snap.phase in (RoundPhase.PLAYING, RoundPhase.GUESSING)
        self.timer_text.visible = in_round
        self.timer_caption.visible = in_round

        self.pause_button.visible = snap.phase is RoundPhase.PLAYING
        self.pause_button.disabled = not snap.has_started_playing
        if snap.phase is RoundPhase.PLAYING and not snap.has_started_playing:
            if self.game.playback.is_initialized:
                self.status_label.value = "Starting playback..."
            else:
                self.status_label.value = "Initializing player..."
        elif snap.phase is RoundPhase.IDLE and self.game.current_track is None and not self.game.last_error:
            self.status_label.value = "Loading next track..."
        else:
            self.status_label.value = ""

        self.guess_panel.visible = snap.phase is RoundPhase.GUESSING
        if snap.phase is RoundPhase.GUESSING and self._phase_changed(snap):
            self.title_field.value = snap.title_guess
            self.artist_field.value = snap.artist_guess

        self.result_panel.visible = snap.phase is RoundPhase.SCORED
        if snap.phase is RoundPhase.SCORED and snap.result is not None and snap.track is not None:
            track = snap.track
            self.cover.src = track.cover_url
            self.cover_link.url = track.album_url
            self.cover_link.visible = bool(track.cover_url)
            self.score_text.value = f"{snap.result.score} points"
            self.score_text.color = BAND_COLORS[score_band(snap.result.score)]
            self.verdict_text.value = "Correct!" if snap.result.is_correct else "Not quite."
            self.track_link.text = track.name
            self.track_link.url = track.external_url
            self.artist_link.text = track.primary_artist
            self.artist_link.url = track.artist_url
            self.result_time.value = f"Time: {format_time(snap.elapsed_seconds)}s"

        # The player error is stale once a new round is under way.
        error = self.game.last_error or (self.game.playback.error if snap.phase is RoundPhase.IDLE else None)
        self.error_label.value = error or ""
        self.error_label.visible = bool(error)
        self.retry_button.visible = bool(error) and self.game.current_track is not None and snap.phase is RoundPhase.IDLE

        history = self.game.ledger.history
        recent = list(reversed(history))[: len(self.history_labels)]
        for i, lbl in enumerate(self.history_labels):
            if i < len(recent):
                entry = recent[i]
                lbl.value = f"{entry.score:>5}  {entry.artist_name} - {entry.track_name}"
                lbl.color = BAND_COLORS[score_band(entry.score)]
            else:
                lbl.value = ""

        self._last_rendered = snap

    def _phase_changed(self, snap: RoundSnapshot) -> bool:
        return self._last_rendered is None or self._last_rendered.phase is not snap.phase

    def start_refresh(self):
        """Re-render while the clock runs; the round machine ticks off the UI thread."""
        if self._running:
            return
        self._running = True
        self._page.run_task(self._refresh_loop)

    def stop_refresh(self):
        self._running = False

    async def _refresh_loop(self):
        while self._running:
            self._refresh_display()
            self._page.update()
            await asyncio.sleep(REFRESH_SECONDS)

    # ── Actions ─────────────────────────────────────────────────────

    def _pause(self):
        self.game.pause_and_guess()
        self._refresh_display()
        self._page.update()

    def _submit(self):
        result = self.game.submit_guess(self.title_field.value or "", self.artist_field.value or "")
        if result is None:
            return
        self._refresh_display()
        self._page.update()

    def _play_again(self):
        self.game.play_again()
        self.title_field.value = ""
        self.artist_field.value = ""
        self._refresh_display()
        self._page.update()

    def _retry(self):
        self.game.retry()
        self._refresh_display()
        self._page.update()

    def _back(self):
        self.stop_refresh()
        self.game.leave()
        if self.on_back:
            self.on_back()

    def show_message(self, msg: str):
        self.snack.content = ft.Text(msg)
        self.snack.open = True
        self._page.update()
