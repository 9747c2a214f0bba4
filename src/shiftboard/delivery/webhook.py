"""Chat webhook sink for rendered schedule images."""

import logging
from typing import Optional

import requests

from shiftboard.errors import DeliveryError

logger = logging.getLogger(__name__)


class WebhookSink:
    """Posts a PNG and a caption to a chat webhook as multipart form data.

    The webhook receives a ``file`` part holding the image and a
    ``content`` field holding the caption.
    """

    def __init__(self, url: str, timeout: float = 30, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session

    def send(self, png: bytes, caption: str, filename: str = "shift.png") -> None:
        """Upload the image.

        Raises:
            DeliveryError: If the request fails or the webhook answers with
                a non-2xx status.
        """
        post = self.session.post if self.session is not None else requests.post
        try:
            resp = post(
                self.url,
                files={"file": (filename, png, "image/png")},
                data={"content": caption},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DeliveryError(f"Webhook request failed: {exc}") from exc

        if not resp.ok:
            raise DeliveryError(
                f"Webhook rejected upload: {resp.status_code} {resp.reason}"
            )
        logger.info("Sent %s (%d bytes) to webhook", filename, len(png))
