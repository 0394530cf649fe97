"""OS keychain storage for the Spotify client secret SongGuess signs in with."""

from typing import Optional

import keyring
from keyring.errors import KeyringError

DEFAULT_SERVICE_NAME = "songguess"


class KeyringSecretStore:
    """Keychain entries under the ``songguess`` service.

    ``set`` returns False when no keychain backend works, which tells the
    config adapter to keep the secret in config.json instead.
    """

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        self.service_name = service_name

    def get(self, key: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service_name, key)
        except KeyringError:
            return None

    def set(self, key: str, value: str) -> bool:
        try:
            if value:
                keyring.set_password(self.service_name, key, value)
            else:
                self.delete(key)
            return True
        except KeyringError:
            return False

    def delete(self, key: str) -> bool:
        try:
            keyring.delete_password(self.service_name, key)
            return True
        except KeyringError:
            return False
