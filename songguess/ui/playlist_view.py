"""Flet playlist picker (free mode) and challenge launcher."""

from typing import Callable, Optional

import flet as ft

from songguess.domain.model import ChallengeEntry, Playlist
from songguess.ui.theme import ACCENT, BG, BG_CARD, BORDER, DANGER, FG, FG_DIM


class PlaylistView(ft.Column):

    def __init__(
        self,
        page: ft.Page,
        playlists: list[Playlist],
        on_select: Callable[[Playlist], None],
        challenge: Optional[list[ChallengeEntry]] = None,
        on_start_challenge: Optional[Callable[[], None]] = None,
        on_export: Optional[Callable[[], None]] = None,
        message: str = "",
    ):
        super().__init__(expand=True, scroll=ft.ScrollMode.AUTO, spacing=8)
        self._page = page
        self.bgcolor = BG
        self.playlists = playlists
        self.on_select = on_select
        self.challenge = challenge
        self.on_start_challenge = on_start_challenge
        self.on_export = on_export

        self.message_box = ft.Container(
            content=ft.Text(message, color=DANGER, size=13),
            bgcolor=BG_CARD,
            border=ft.border.all(1, DANGER),
            border_radius=8,
            padding=12,
            visible=bool(message),
        )
        self._build_ui()

    def _build_ui(self):
        title = "Challenge Mode" if self.challenge is not None else "Your Playlists"
        controls: list[ft.Control] = [
            ft.Row(
                [
                    ft.Text(title, size=22, weight=ft.FontWeight.BOLD, color=FG),
                    ft.Container(expand=True),
                    ft.TextButton(
                        "Export history (CSV)",
                        icon=ft.Icons.DOWNLOAD,
                        on_click=lambda _: self.on_export(),
                        visible=self.on_export is not None,
                    ),
                ],
            ),
            self.message_box,
        ]

        if self.challenge is not None:
            controls.append(
                ft.Text(f"{len(self.challenge)} tracks, played in a fixed order.", size=12, color=FG_DIM)
            )
            if self.on_start_challenge:
                controls.append(
                    ft.ElevatedButton(
                        "Start challenge",
                        icon=ft.Icons.PLAY_ARROW,
                        on_click=lambda _: self.on_start_challenge(),
                        bgcolor=ACCENT,
                        color="white",
                    )
                )
        elif not self.playlists:
            controls.append(ft.Text("No playlists found.", size=12, color=FG_DIM))
        else:
            controls.append(
                ft.Row([self._playlist_card(pl) for pl in self.playlists], wrap=True, spacing=10, run_spacing=10)
            )

        self.controls = [ft.Container(content=ft.Column(controls, spacing=10), padding=20)]

    def _playlist_card(self, playlist: Playlist) -> ft.Container:
        cover: ft.Control
        if playlist.image_url:
            cover = ft.Image(src=playlist.image_url, width=140, height=140, border_radius=6)
        else:
            cover = ft.Container(width=140, height=140, bgcolor=BORDER, border_radius=6)
        return ft.Container(
            width=160,
            bgcolor=BG_CARD,
            border=ft.border.all(1, BORDER),
            border_radius=8,
            padding=10,
            ink=True,
            on_click=lambda _: self.on_select(playlist),
            content=ft.Column(
                [
                    cover,
                    ft.Text(playlist.name, size=13, color=FG, weight=ft.FontWeight.BOLD, max_lines=2),
                    ft.Text(f"{playlist.track_count} tracks", size=11, color=FG_DIM),
                ],
                spacing=4,
            ),
        )

    def show_message(self, msg: str):
        self.message_box.content = ft.Text(msg, color=DANGER, size=13)
        self.message_box.visible = bool(msg)
        self._page.update()
