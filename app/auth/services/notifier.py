"""
Delivery of verification and password reset links.

Links are written to the application log; swapping in a mail sender only
requires another object with the same two coroutines.
"""

import logging
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


class LinkNotifier:
    """Builds one-time links for the frontend and emits them."""

    def __init__(self, frontend_url: str):
        self._frontend_url = frontend_url.rstrip("/")

    def build_link(self, path: str, token: str) -> str:
        return f"{self._frontend_url}/{path}?{urlencode({'token': token})}"

    async def send_verification(self, email: str, token: str) -> str:
        link = self.build_link("verify-email", token)
        logger.info(f"VERIFY EMAIL LINK for {email}: {link}")
        return link

    async def send_password_reset(self, email: str, token: str) -> str:
        link = self.build_link("reset-password", token)
        logger.info(f"RESET PASSWORD LINK for {email}: {link}")
        return link
