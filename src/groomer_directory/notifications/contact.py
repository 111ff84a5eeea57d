"""
Contact form handling: validate and store a message, then notify the site owner.

The stored message is the source of truth: a failed notification email is
logged but does not fail the submission.
"""

import re
from dataclasses import dataclass
from typing import Optional

from groomer_directory.data.repository import DirectoryRepository
from groomer_directory.exceptions import InvalidContactError
from groomer_directory.logging_config import get_logger
from groomer_directory.notifications.email import EmailSender, build_contact_notification

logger = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass
class ContactResult:
    message_id: int
    notified: bool


def validate_contact(name: str | None, email: str | None, message: str | None) -> tuple[str, str, str]:
    """
    Check a submission and return its trimmed fields.

    Raises:
        InvalidContactError: If a field is missing or the email is malformed.
    """
    fields = {"name": name, "email": email, "message": message}
    missing = [key for key, value in fields.items() if not value or not value.strip()]
    if missing:
        raise InvalidContactError("Missing required fields", details={"missing": missing})

    email = email.strip()
    if not EMAIL_RE.match(email):
        raise InvalidContactError("Invalid email format", details={"email": email})
    return name.strip(), email, message.strip()


class ContactService:
    """
    Usage:
        with session_factory() as session:
            service = ContactService(DirectoryRepository(session), EmailSender())
            service.submit("Sam", "sam@example.com", "Hello")
    """

    def __init__(
        self,
        repository: DirectoryRepository,
        sender: EmailSender,
        notification_email: Optional[str] = None,
    ):
        self.repository = repository
        self.sender = sender
        self.notification_email = notification_email or sender.config.notification_email

    def submit(self, name: str | None, email: str | None, message: str | None) -> ContactResult:
        """
        Store a contact message and email a notification.

        Raises:
            InvalidContactError: For incomplete or invalid submissions.
            DatabaseQueryError: If the message could not be stored.
        """
        name, email, message = validate_contact(name, email, message)
        record = self.repository.add_contact_message(name=name, email=email, message=message)
        self.repository.commit()
        logger.info("Stored contact message %d from %s", record.id, email)

        if not self.notification_email:
            logger.debug("No notification address configured; skipping email")
            return ContactResult(message_id=record.id, notified=False)

        subject, body = build_contact_notification(name, email, message)
        result = self.sender.send(self.notification_email, subject, body)
        if not result.success:
            logger.error("Contact notification for message %d failed: %s", record.id, result.error)
        return ContactResult(message_id=record.id, notified=result.success)
