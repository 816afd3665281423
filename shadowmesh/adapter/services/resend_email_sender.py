import logging

import httpx

from shadowmesh.app.services.email_sender import EmailDeliveryError, IEmailSender

logger = logging.getLogger(__name__)


class ResendEmailSender(IEmailSender):
    """Sends mail through the Resend REST API"""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def send(self, recipient: str, subject: str, html_body: str) -> None:
        if not self.api_key:
            raise EmailDeliveryError("RESEND_API_KEY is not configured")

        payload = {
            "from": self.from_email,
            "to": [recipient],
            "subject": subject,
            "html": html_body,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Email provider unreachable: {type(exc).__name__}") from exc

        if response.status_code >= 400:
            raise EmailDeliveryError(f"Email provider rejected message: HTTP {response.status_code}")

        logger.info(f"Email accepted by provider: {subject}")
