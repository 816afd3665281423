from typing import List, Tuple

from shadowmesh.app.services.email_sender import EmailDeliveryError, IEmailSender


class RecordingEmailSender(IEmailSender):
    """Keeps sent messages in memory instead of calling the provider"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages: List[Tuple[str, str, str]] = []

    async def send(self, recipient: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise EmailDeliveryError("delivery disabled in test")
        self.messages.append((recipient, subject, html_body))

    def last_to(self, recipient: str) -> str:
        """HTML body of the most recent message to recipient"""
        for to, _, body in reversed(self.messages):
            if to == recipient:
                return body
        raise AssertionError(f"No email sent to {recipient}")
