"""Local OAuth token persistence.

The token file holds only what is needed to mint new access tokens
(client id/secret and a refresh token), in the ``authorized_user`` format
understood by ``google.oauth2.credentials.Credentials``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from google.oauth2.credentials import Credentials

from out_of_office.config import Settings
from out_of_office.exceptions import AuthenticationError, ConfigurationError
from out_of_office.models import StoredToken

logger = structlog.get_logger()


class CredentialStore:
    """Reads and writes the local token file and runs the interactive login."""

    def __init__(self, settings: Settings | None = None) -> None:
        from out_of_office.config import get_settings

        self.settings = settings or get_settings()

    @property
    def credentials_path(self) -> Path:
        return Path(self.settings.gmail_credentials_path)

    @property
    def token_path(self) -> Path:
        return Path(self.settings.gmail_token_path)

    @property
    def scopes(self) -> list[str]:
        return [self.settings.gmail_scope]

    def load(self) -> Credentials | None:
        """Load previously saved credentials.

        Returns:
            The saved credentials, or None when there is no usable token file.
        """
        try:
            info = json.loads(self.token_path.read_text(encoding="utf-8"))
            if not isinstance(info, dict):
                raise ValueError(f"expected a JSON object, got {type(info).__name__}")
            creds = Credentials.from_authorized_user_info(info, scopes=self.scopes)
        except FileNotFoundError:
            logger.debug("token_file_missing", token_path=str(self.token_path))
            return None
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError and missing token fields are both ValueErrors.
            logger.debug("token_file_unusable", token_path=str(self.token_path), error=str(exc))
            return None

        logger.info("credentials_loaded", token_path=str(self.token_path))
        return creds

    def save(self, credentials: Any) -> StoredToken:
        """Persist the refresh token together with the client id and secret.

        Args:
            credentials: Object exposing a ``refresh_token`` attribute.

        Returns:
            The token that was written.

        Raises:
            ConfigurationError: If the client-secret file has no client entry.
        """
        keys = json.loads(self.credentials_path.read_text(encoding="utf-8"))
        key = keys.get("installed") or keys.get("web")
        if not key:
            raise ConfigurationError(
                f"{self.credentials_path} has neither an 'installed' nor a 'web' client entry"
            )

        token = StoredToken(
            client_id=key["client_id"],
            client_secret=key["client_secret"],
            refresh_token=credentials.refresh_token,
        )
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(token.model_dump_json(), encoding="utf-8")

        logger.info("credentials_saved", token_path=str(self.token_path))
        return token

    def authorize(self) -> Credentials:
        """Return usable credentials, running the interactive login if needed.

        Raises:
            ConfigurationError: If login is needed but the client-secret file is missing.
            AuthenticationError: If the interactive login fails.
        """
        creds = self.load()
        if creds is not None:
            return creds

        if not self.credentials_path.exists():
            raise ConfigurationError(
                f"Gmail credentials file not found: {self.credentials_path}. "
                "Download an OAuth desktop client from Google Cloud Console."
            )

        # Imported lazily; only needed for the first login.
        from google_auth_oauthlib.flow import InstalledAppFlow

        logger.info(
            "interactive_login_started",
            credentials_path=str(self.credentials_path),
            scopes=self.scopes,
        )
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self.credentials_path), scopes=self.scopes
            )
            creds = flow.run_local_server(port=self.settings.oauth_port)
        except Exception as exc:  # noqa: BLE001
            logger.exception("interactive_login_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        if creds.refresh_token:
            self.save(creds)
        else:
            logger.warning("interactive_login_without_refresh_token")

        logger.info("interactive_login_completed")
        return creds
