"""Flet first-launch form: Spotify credentials and playback backend."""

from typing import Callable, Optional

import flet as ft

from songguess.adapters.config.json_config_adapter import PLAYBACK_BACKENDS
from songguess.domain.ports import ConfigPort
from songguess.ui.theme import ACCENT, BG_CARD, BG_INPUT, BORDER, DANGER, FG, FG_DIM

BACKEND_LABELS = {
    "spotify": "Spotify Connect (Premium, active device)",
    "preview": "30s previews on this computer",
    "dry_run": "Silent simulation",
}


class SetupView(ft.Column):
    """Single-card configuration form."""

    def __init__(
        self,
        page: ft.Page,
        config: ConfigPort,
        on_complete: Callable[[], None],
        on_cancel: Optional[Callable[[], None]] = None,
    ):
        super().__init__(horizontal_alignment=ft.CrossAxisAlignment.CENTER)
        self._page = page
        self.config = config
        self.on_complete = on_complete
        self.on_cancel = on_cancel
        self.cfg = config.load()

        self.client_id = ft.TextField(
            label="Client ID",
            value=self.cfg.get("spotify_client_id", ""),
            bgcolor=BG_INPUT,
            color=FG,
            border_color=BORDER,
            focused_border_color=ACCENT,
            label_style=ft.TextStyle(color=FG_DIM),
        )
        self.client_secret = ft.TextField(
            label="Client Secret",
            value=self.cfg.get("spotify_client_secret", ""),
            password=True,
            can_reveal_password=True,
            bgcolor=BG_INPUT,
            color=FG,
            border_color=BORDER,
            focused_border_color=ACCENT,
            label_style=ft.TextStyle(color=FG_DIM),
        )
        self.backend = ft.Dropdown(
            label="Playback",
            value=self.cfg.get("playback_backend", "spotify"),
            options=[ft.dropdown.Option(key=k, text=BACKEND_LABELS[k]) for k in PLAYBACK_BACKENDS],
            bgcolor=BG_INPUT,
            color=FG,
        )
        self.error_text = ft.Text("", color=DANGER, size=12)

        actions = [ft.ElevatedButton("Save", on_click=self._on_finish, bgcolor=ACCENT, color="white")]
        if self.on_cancel:
            actions.insert(0, ft.TextButton("Cancel", on_click=lambda _: self.on_cancel()))

        self.controls = [
            ft.Container(
                width=560,
                bgcolor=BG_CARD,
                border=ft.border.all(1, BORDER),
                border_radius=10,
                padding=20,
                content=ft.Column(
                    [
                        ft.Text("Connect Spotify", size=18, weight=ft.FontWeight.BOLD, color=FG),
                        ft.Text(
                            "Create an app at developer.spotify.com and use "
                            "http://127.0.0.1:8888/callback as redirect URI.",
                            size=11,
                            color=FG_DIM,
                        ),
                        self.client_id,
                        self.client_secret,
                        self.backend,
                        self.error_text,
                        ft.Row(actions, alignment=ft.MainAxisAlignment.END),
                    ],
                    spacing=10,
                ),
            )
        ]

    def _on_finish(self, _e):
        if not self._validate_spotify_fields():
            self._page.update()
            return
        self.cfg["playback_backend"] = self.backend.value or "spotify"
        self.config.save(self.cfg)
        self.on_complete()

    def _validate_spotify_fields(self) -> bool:
        cid = (self.client_id.value or "").strip()
        secret = (self.client_secret.value or "").strip()
        if not cid or not secret:
            self.error_text.value = "Client ID and Client Secret are required."
            return False
        self.cfg["spotify_client_id"] = cid
        self.cfg["spotify_client_secret"] = secret
        self.error_text.value = ""
        return True
