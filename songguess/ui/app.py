"""Main Flet application: wires adapters, orchestrator and views."""

import json
import logging
from typing import Optional

import flet as ft
import requests
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyOauthError

from songguess.adapters.config.json_config_adapter import JsonConfigAdapter
from songguess.adapters.history.json_history_adapter import JsonHistoryAdapter
from songguess.adapters.playback.dry_run_playback import DryRunPlaybackAdapter
from songguess.adapters.spotify.auth import get_spotify_client
from songguess.adapters.spotify.catalog_adapter import SpotifyCatalogAdapter
from songguess.adapters.spotify.playback_adapter import SpotifyPlaybackAdapter
from songguess.adapters.timer.thread_scheduler import ThreadScheduler
from songguess.domain.model import ChallengeEntry, Playlist
from songguess.domain.ports import PlaybackPort
from songguess.ui.game_view import GameView
from songguess.ui.playlist_view import PlaylistView
from songguess.ui.setup_view import SetupView
from songguess.ui.theme import ACCENT, BG, DANGER, FG
from songguess.usecases.export_session import ExportHistoryUseCase
from songguess.usecases.game_session import CHALLENGE_COMPLETE_MESSAGE, EXHAUSTED_MESSAGE, GameOrchestrator
from songguess.usecases.resume_session import ResumeSessionUseCase

logger = logging.getLogger("songguess.ui")


def build_playback(cfg: dict, sp) -> PlaybackPort:
    backend = cfg.get("playback_backend", "spotify")
    if backend == "dry_run":
        return DryRunPlaybackAdapter()
    if backend == "preview":
        # pygame is imported only when the preview backend is selected.
        from songguess.adapters.playback.preview_playback import PygamePreviewPlayback

        return PygamePreviewPlayback()
    return SpotifyPlaybackAdapter(sp)


def load_challenge(path: str) -> list[ChallengeEntry]:
    """Read a challenge file: a JSON list, or an object with a ``tracks`` list."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("tracks", [])
    return ChallengeEntry.parse_list(data)


def run_app(challenge: Optional[list[ChallengeEntry]] = None):
    logger.info("App boot sequence started (challenge=%s)", challenge is not None)

    def main(page: ft.Page):
        page.title = "SongGuess"
        page.bgcolor = BG
        page.window.width = 900
        page.window.height = 760

        config = JsonConfigAdapter()
        state: dict = {"game": None, "view": None, "history": None}

        def show(view: ft.Control):
            page.controls.clear()
            page.add(view)
            state["view"] = view
            page.update()

        def show_error_view(title: str, hint: str):
            show(
                ft.Container(
                    content=ft.Column(
                        [
                            ft.Icon(ft.Icons.ERROR_OUTLINE, color=DANGER, size=48),
                            ft.Text(title, color=DANGER, size=20, weight=ft.FontWeight.BOLD),
                            ft.Text(hint, color=FG, size=14, text_align=ft.TextAlign.CENTER),
                            ft.ElevatedButton(
                                "Reconfigure",
                                icon=ft.Icons.SETTINGS,
                                on_click=lambda _: show_setup(),
                                bgcolor=ACCENT,
                                color="white",
                            ),
                        ],
                        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                        alignment=ft.MainAxisAlignment.CENTER,
                        spacing=8,
                    ),
                    expand=True,
                    alignment=ft.Alignment(0, 0),
                )
            )

        def show_setup():
            logger.info("Opening setup form")
            show(SetupView(page=page, config=config, on_complete=launch))

        def notify(message: str):
            view = state["view"]
            if isinstance(view, (GameView, PlaylistView)):
                view.show_message(message)

        def show_playlists(message: str = ""):
            game: GameOrchestrator = state["game"]
            if isinstance(state["view"], GameView):
                state["view"].stop_refresh()
            if challenge is not None:
                finished = game.ledger.played_count >= len(challenge)
                show(
                    PlaylistView(
                        page=page,
                        playlists=[],
                        on_select=select_playlist,
                        challenge=challenge,
                        on_start_challenge=None if finished else start_challenge,
                        on_export=export_history,
                        message=message,
                    )
                )
                return
            playlists = game.list_playlists()
            show(
                PlaylistView(
                    page=page,
                    playlists=playlists,
                    on_select=select_playlist,
                    on_export=export_history,
                    message=message or (game.last_error or ""),
                )
            )

        def export_history():
            game: GameOrchestrator = state["game"]
            try:
                path = ExportHistoryUseCase(state["history"]).execute(game.ledger)
            except OSError:
                logger.exception("History export failed")
                notify("Could not export history.")
                return
            logger.info("History exported (%s rounds, path=%s)", game.ledger.played_count, path)
            notify(f"History exported to {path}")

        def open_game_view() -> GameView:
            view = GameView(page=page, orchestrator=state["game"], on_back=show_playlists)
            show(view)
            view.start_refresh()
            return view

        def select_playlist(playlist: Playlist):
            logger.info("Playlist selected (id=%s)", playlist.id)
            open_game_view()
            state["game"].select_playlist(playlist)

        def start_challenge():
            open_game_view()
            state["game"].start_challenge(challenge)

        def launch():
            cfg = config.load()
            try:
                sp = get_spotify_client(
                    client_id=cfg["spotify_client_id"],
                    client_secret=cfg["spotify_client_secret"],
                    redirect_uri=cfg["spotify_redirect_uri"],
                )
                user = sp.current_user()
                logger.info("Spotify auth success (user=%s)", user.get("display_name") or user.get("id"))
            except (SpotifyException, SpotifyOauthError, requests.RequestException):
                logger.exception("Spotify authentication failed")
                show_error_view(
                    "Authentication Error",
                    "Check your Spotify Developer credentials and try again.",
                )
                return

            history = JsonHistoryAdapter(cfg["history_file"])
            state["history"] = history
            ledger = ResumeSessionUseCase(history).execute(fresh=challenge is not None)
            if state["game"] is not None:
                state["game"].close()
            state["game"] = GameOrchestrator(
                catalog=SpotifyCatalogAdapter(sp),
                playback=build_playback(cfg, sp),
                scheduler=ThreadScheduler(),
                ledger=ledger,
                history=history,
                on_round_scored=lambda result: logger.info("Round result shown (score=%s)", result.score),
                on_exhausted=lambda: show_playlists(EXHAUSTED_MESSAGE),
                on_challenge_complete=lambda: show_playlists(CHALLENGE_COMPLETE_MESSAGE),
                on_error=notify,
            )
            show_playlists()

        def on_disconnect(_e):
            if state["game"] is not None:
                state["game"].close()

        page.on_disconnect = on_disconnect

        if config.is_configured():
            launch()
        else:
            show_setup()

    ft.app(target=main)
