"""Outbound email adapters."""

import logging
from dataclasses import dataclass

import httpx

from riding_school.services.notifications import EmailClient

logger = logging.getLogger(__name__)

DEFAULT_EMAIL_API_URL = "https://api.resend.com/emails"


@dataclass
class HttpxEmailClient(EmailClient):
    """Email client for Resend-compatible HTTP APIs."""

    api_key: str
    sender: str
    http_client: httpx.AsyncClient
    api_url: str = DEFAULT_EMAIL_API_URL

    @classmethod
    def create(
        cls, api_key: str, sender: str, api_url: str = DEFAULT_EMAIL_API_URL
    ) -> "HttpxEmailClient":
        """Create an email client with a managed httpx session."""
        return cls(
            api_key=api_key,
            sender=sender,
            http_client=httpx.AsyncClient(),
            api_url=api_url,
        )

    async def send_email(self, to: str, subject: str, html: str) -> None:
        """Send an HTML email through the provider API."""
        response = await self.http_client.post(
            self.api_url,
            json={"from": self.sender, "to": [to], "subject": subject, "html": html},
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=10,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()


@dataclass
class LoggingEmailClient(EmailClient):
    """Stand-in used when no email provider is configured."""

    async def send_email(self, to: str, subject: str, html: str) -> None:
        logger.info("Email disabled, would send to %s: %s", to, subject)

    async def close(self) -> None:
        return None
