import json
import logging
import os
from typing import Callable, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from linkaudit.exceptions import CredentialsError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
PROMPT = "Authorize this app by visiting this url: {url}"


class Authorizer:
    """Obtain OAuth credentials for the Sheets API.

    Uses the cached token at `token_path` when present, refreshing it if it has
    expired. Otherwise runs the installed-app consent flow, which blocks until
    the user approves in a browser, and writes the new token to `token_path`.
    """

    def __init__(self, client_secret_path: str, token_path: str, flow_factory: Optional[Callable] = None):
        self.client_secret_path = client_secret_path
        self.token_path = token_path
        self._flow_factory = flow_factory or InstalledAppFlow.from_client_config

    def load_client_config(self) -> dict:
        try:
            with open(self.client_secret_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise CredentialsError(self.client_secret_path, f"could not be read: {e}") from e
        except ValueError as e:
            raise CredentialsError(self.client_secret_path, f"is not valid JSON: {e}") from e
        if not isinstance(data, dict) or not ("installed" in data or "web" in data):
            raise CredentialsError(self.client_secret_path, "has no 'installed' or 'web' client section")
        return data

    def authorize(self) -> Credentials:
        logger.info("Authorizing...")
        client_config = self.load_client_config()
        credentials = self._load_cached_token()
        if credentials is None:
            credentials = self._new_token(client_config)
        logger.info("-> Authorization: OK")
        return credentials

    def _load_cached_token(self) -> Optional[Credentials]:
        if not os.path.exists(self.token_path):
            return None
        try:
            credentials = Credentials.from_authorized_user_file(self.token_path, SCOPES)
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable token cache %s", self.token_path, exc_info=True)
            return None
        if credentials.expired and credentials.refresh_token:
            try:
                credentials.refresh(Request())
            except GoogleAuthError as e:
                raise CredentialsError(self.token_path, f"could not be refreshed: {e}") from e
            self.store_token(credentials)
        return credentials

    def _new_token(self, client_config: dict) -> Credentials:
        flow = self._flow_factory(client_config, SCOPES)
        try:
            credentials = flow.run_local_server(port=0, open_browser=False, authorization_prompt_message=PROMPT)
        except Exception as e:
            raise CredentialsError(self.client_secret_path, f"token exchange failed: {e}") from e
        self.store_token(credentials)
        return credentials

    def store_token(self, credentials: Credentials) -> None:
        os.makedirs(os.path.dirname(self.token_path), exist_ok=True)
        with open(self.token_path, "w", encoding="utf-8") as f:
            f.write(credentials.to_json())
        logger.info("Token stored to %s", self.token_path)
