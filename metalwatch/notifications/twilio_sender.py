"""Twilio SMS transport.

API Reference:
    Base URL: https://api.twilio.com/2010-04-01
    Send:     POST /Accounts/{account_sid}/Messages.json (form-encoded Body, From, To)
    Auth:     HTTP basic, account SID and auth token
    Errors:   JSON body with ``code`` and ``message``
"""

import requests

from metalwatch.notifications.base_sender import BaseMessageSender
from metalwatch.shared.errors import DeliveryError


class TwilioSender(BaseMessageSender):
    """Sends SMS through the Twilio Messages REST API."""

    API_BASE = "https://api.twilio.com/2010-04-01"
    MESSAGES_ENDPOINT = "/Accounts/{account_sid}/Messages.json"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        if not account_sid or not auth_token:
            raise ValueError("Twilio account SID and auth token are required")
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.timeout = timeout
        self._session = session or requests.Session()

    def send(self, body: str, from_: str, to: str) -> str:
        url = f"{self.API_BASE}{self.MESSAGES_ENDPOINT.format(account_sid=self.account_sid)}"
        try:
            response = self._session.post(
                url,
                data={"Body": body, "From": from_, "To": to},
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DeliveryError(to, f"request failed: {e}") from e

        if response.status_code >= 400:
            raise DeliveryError(to, self._error_reason(response))

        try:
            payload = response.json()
        except ValueError as e:
            raise DeliveryError(to, f"unreadable response: {e}") from e
        if not isinstance(payload, dict):
            raise DeliveryError(to, f"unexpected response body: {type(payload).__name__}")
        return str(payload.get("sid", ""))

    @staticmethod
    def _error_reason(response: requests.Response) -> str:
        try:
            error = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if not isinstance(error, dict):
            return f"HTTP {response.status_code}"
        return f"HTTP {response.status_code} (code {error.get('code')}): {error.get('message')}"
