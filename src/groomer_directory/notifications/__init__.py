"""Notifications: email delivery and the contact form."""

from groomer_directory.notifications.email import EmailSender, EmailResult, build_contact_notification
from groomer_directory.notifications.contact import ContactService, ContactResult, validate_contact

__all__ = [
    "EmailSender",
    "EmailResult",
    "build_contact_notification",
    "ContactService",
    "ContactResult",
    "validate_contact",
]
