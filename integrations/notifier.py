"""
Message notifier - sends text messages through a WhatsApp Cloud API style gateway
"""
import logging
import re
from typing import Optional

import requests

from config import settings
from models.errors import CollaboratorError, ValidationError

logger = logging.getLogger(__name__)


class MessageNotifier:
    """
    Client for the messaging gateway.
    Runs in stub mode (log only) when no API URL or key is configured.
    """

    def __init__(
        self,
        api_url: str = None,
        api_key: str = None,
        country_code: str = None,
        timeout: int = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url or settings.NOTIFY_API_URL
        self.api_key = api_key or settings.NOTIFY_API_KEY
        self.country_code = country_code or settings.NOTIFY_COUNTRY_CODE
        self.timeout = timeout or settings.NOTIFY_TIMEOUT
        self.session = session or requests.Session()

    @property
    def stub_mode(self) -> bool:
        return not (self.api_url and self.api_key)

    def normalize_destination(self, destination: str) -> str:
        """
        Digits only, with the country code added to local numbers
        Examples: "98765 43210" -> "919876543210", "+44 7700 900123" -> "447700900123"
        """
        digits = re.sub(r'\D', '', str(destination or ""))
        if not digits:
            raise ValidationError(f"Invalid destination: {destination!r}")
        if len(digits) == 10:
            digits = f"{self.country_code}{digits}"
        return digits

    def notify(self, destination: str, text: str) -> Optional[str]:
        """
        Send a text message.

        Returns:
            The gateway's message id, or None in stub mode.

        Raises:
            CollaboratorError if the gateway call fails.
        """
        to = self.normalize_destination(destination)

        if self.stub_mode:
            logger.warning(f"Notifier in stub mode; message to {to} not sent")
            logger.debug(f"Stub message to {to}: {text}")
            return None

        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text},
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send message to {to}: {e}")
            raise CollaboratorError("notifier", "notify", e)
        except ValueError as e:
            logger.error(f"Invalid JSON response from messaging gateway: {e}")
            raise CollaboratorError("notifier", "notify", e)

        messages = result.get("messages") or [{}]
        message_id = messages[0].get("id", "sent")
        logger.info(f"Message sent to {to} ({message_id})")
        return message_id
