from abc import ABC, abstractmethod


class EmailDeliveryError(Exception):
    """The e-mail collaborator rejected or could not accept a message"""


class IEmailSender(ABC):
    """Transactional e-mail collaborator - application layer"""

    @abstractmethod
    async def send(self, recipient: str, subject: str, html_body: str) -> None:
        """Send one HTML message. Raises EmailDeliveryError on failure."""
        pass
