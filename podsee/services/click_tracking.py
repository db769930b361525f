"""
Outbound click tracking: destination checks and best-effort webhook logging
"""
import threading
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

import requests

ALLOWED_SCHEMES = ('http', 'https')


def is_allowed_destination(destination: Optional[str]) -> bool:
    """Only absolute http(s) URLs may be redirected to"""
    if not destination:
        return False
    # Whitespace or control characters cannot go into a Location header
    if any(c.isspace() or ord(c) < 0x20 or ord(c) == 0x7f for c in destination):
        return False
    try:
        parsed = urlparse(destination)
        hostname = parsed.hostname
    except ValueError:
        return False
    return parsed.scheme in ALLOWED_SCHEMES and bool(parsed.netloc) and bool(hostname)


def build_log_record(centre_id, destination, source_page=None, user_agent=None, now=None) -> dict:
    now = now or datetime.now(timezone.utc)
    return {
        'centreId': centre_id or 'unknown',
        'destination': destination,
        'sourcePage': source_page or '',
        'userAgent': user_agent or '',
        'timestamp': now.isoformat().replace('+00:00', 'Z'),
    }


class ClickLogger:
    """Posts click records to a webhook without making the caller wait"""

    def __init__(self, webhook_url: Optional[str] = None, timeout: float = 5):
        self.webhook_url = webhook_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> 'ClickLogger':
        return cls(config.get('CLICK_LOG_WEBHOOK_URL'), config.get('CLICK_LOG_TIMEOUT', 5))

    def _send(self, record: dict) -> bool:
        try:
            requests.post(self.webhook_url, json=record, timeout=self.timeout)
            return True
        except requests.exceptions.RequestException as e:
            print(f"[ClickLogger] Webhook logging failed: {e}")
            return False

    def dispatch(self, record: dict) -> Optional[threading.Thread]:
        """
        Send a click record in the background

        Delivery is attempted once; the outcome is only printed.

        Returns:
            The sender thread, or None when no webhook is configured
        """
        if not self.webhook_url:
            print("[ClickLogger] Warning: CLICK_LOG_WEBHOOK_URL not configured")
            return None

        thread = threading.Thread(target=self._send, args=(record,))
        thread.daemon = True
        thread.start()
        return thread
