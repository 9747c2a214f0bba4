"""Configuration for rendering and for the external services.

``RenderConfig`` holds the table geometry and colours. ``Settings`` holds
the credentials and endpoints, read from the environment (and from a
``.env.local`` file when present).
"""

import base64
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from dotenv import load_dotenv

from shiftboard.domain.slots import SlotGrid
from shiftboard.errors import ConfigurationError


@dataclass
class RenderConfig:
    """Geometry, colours and limits for the schedule table.

    Attributes:
        width: Total image width in pixels.
        row_height: Height of one table row.
        header_height: Height of the title and hour-label band.
        date_fraction: Share of the width used by the date column.
        name_fraction: Share of the width used by the name column.
        start_hour: First hour of the slot grid.
        end_hour: Last hour of the slot grid (its ``:00`` slot is included).
        exempt_slots: Slots never flagged as uncovered.
        max_rows: Largest number of table rows accepted; None for no limit.
        font_path: Optional TrueType font; Pillow's bundled font otherwise.
    """

    width: int = 900
    row_height: int = 36
    header_height: int = 60
    date_fraction: float = 0.13
    name_fraction: float = 0.12
    start_hour: int = 11
    end_hour: int = 21
    exempt_slots: frozenset[str] = frozenset(
        {"11:00", "11:30", "12:00", "20:30", "21:00"}
    )
    max_rows: Optional[int] = 1000
    font_path: Optional[str] = None

    # Font sizes
    title_font_size: int = 28
    hour_font_size: int = 13
    date_font_size: int = 16
    name_font_size: int = 15

    # Colours
    background_color: str = "#ffffff"
    title_color: str = "#222222"
    hour_label_color: str = "#444444"
    text_color: str = "#333333"
    scheduled_color: str = "#4f8cff"
    alert_color: str = "#ff4f4f"
    cell_border_color: str = "#dddddd"
    rule_color: str = "#bbbbbb"
    group_rule_color: str = "#888888"
    group_rule_width: int = 3

    title_template: str = "Shift Schedule {year}/{month}"

    @property
    def slot_grid(self) -> SlotGrid:
        return SlotGrid(self.start_hour, self.end_hour)

    def title(self, year: int, month: int) -> str:
        return self.title_template.format(year=year, month=month)


FIREBASE_FIELDS = {
    "type": "FIREBASE_TYPE",
    "project_id": "FIREBASE_PROJECT_ID",
    "private_key_id": "FIREBASE_PRIVATE_KEY_ID",
    "client_email": "FIREBASE_CLIENT_EMAIL",
    "client_id": "FIREBASE_CLIENT_ID",
    "auth_uri": "FIREBASE_AUTH_URI",
    "token_uri": "FIREBASE_TOKEN_URI",
    "auth_provider_x509_cert_url": "FIREBASE_AUTH_PROVIDER_X509_CERT_URL",
    "client_x509_cert_url": "FIREBASE_CLIENT_X509_CERT_URL",
}

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def restore_newlines(value: str) -> str:
    """Turn escaped ``\\n`` sequences from env files into real newlines."""
    return value.replace("\\n", "\n")


def decode_b64(value: str) -> str:
    return base64.b64decode(value).decode("utf-8")


def encode_private_key(raw: str) -> str:
    """Base64-encode a PEM key copied from an env file.

    Hosting dashboards mangle multi-line values, so keys are stored
    base64-encoded and decoded again by ``Settings.from_env``.
    """
    return base64.b64encode(restore_newlines(raw).encode("utf-8")).decode("ascii")


@dataclass
class Settings:
    """Endpoints and credentials for the store and the delivery sinks."""

    webhook_url: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    google_client_email: Optional[str] = None
    google_private_key: Optional[str] = None
    firebase: dict[str, str] = field(default_factory=dict)
    firebase_private_key: Optional[str] = None

    @classmethod
    def from_env(
        cls,
        env_file: Optional[str] = ".env.local",
        environ: Optional[dict[str, str]] = None,
    ) -> "Settings":
        """Read settings from the environment.

        Args:
            env_file: Dotenv file loaded first, if it exists. Values already
                in the environment win.
            environ: Mapping to read instead of ``os.environ``.
        """
        if environ is None:
            if env_file and os.path.exists(env_file):
                load_dotenv(env_file)
            environ = dict(os.environ)

        firebase_key = None
        if environ.get("FIREBASE_PRIVATE_KEY_B64"):
            firebase_key = decode_b64(environ["FIREBASE_PRIVATE_KEY_B64"])
        elif environ.get("FIREBASE_PRIVATE_KEY"):
            firebase_key = restore_newlines(environ["FIREBASE_PRIVATE_KEY"])

        google_key = None
        if environ.get("GOOGLE_PRIVATE_KEY_B64"):
            google_key = decode_b64(environ["GOOGLE_PRIVATE_KEY_B64"])

        return cls(
            webhook_url=environ.get("DISCORD_WEBHOOK_URL") or None,
            spreadsheet_id=environ.get("SPREADSHEET_ID") or None,
            google_client_email=environ.get("GOOGLE_CLIENT_EMAIL") or None,
            google_private_key=google_key,
            firebase={
                key: environ[name]
                for key, name in FIREBASE_FIELDS.items()
                if environ.get(name)
            },
            firebase_private_key=firebase_key,
        )

    def require_webhook_url(self) -> str:
        if not self.webhook_url:
            raise ConfigurationError("DISCORD_WEBHOOK_URL is not set")
        return self.webhook_url

    def require_spreadsheet_id(self) -> str:
        if not self.spreadsheet_id:
            raise ConfigurationError("SPREADSHEET_ID is not set")
        return self.spreadsheet_id

    def firebase_credentials(self) -> dict[str, Any]:
        """Service-account info for the Firebase Admin SDK."""
        if not self.firebase_private_key or "project_id" not in self.firebase:
            raise ConfigurationError(
                "Firebase credentials are incomplete: set FIREBASE_PROJECT_ID "
                "and FIREBASE_PRIVATE_KEY_B64 (or FIREBASE_PRIVATE_KEY)"
            )
        info: dict[str, Any] = {"type": "service_account", **self.firebase}
        info["private_key"] = self.firebase_private_key
        return info

    def google_credentials(self) -> dict[str, Any]:
        """Service-account info for the Sheets API client."""
        if not self.google_client_email or not self.google_private_key:
            raise ConfigurationError(
                "Google credentials are incomplete: set GOOGLE_CLIENT_EMAIL "
                "and GOOGLE_PRIVATE_KEY_B64"
            )
        return {
            "type": "service_account",
            "client_email": self.google_client_email,
            "private_key": self.google_private_key,
            "token_uri": GOOGLE_TOKEN_URI,
        }
