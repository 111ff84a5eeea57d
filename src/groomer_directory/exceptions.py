"""
Custom exception hierarchy for the Groomer Directory.

Provides specific exception types for each subsystem,
enabling targeted error handling throughout the application.
A missing match is never an exception: resolvers return a sentinel.
"""


class DirectoryError(Exception):
    """Base exception for all Groomer Directory errors."""

    def __init__(self, message: str = "", details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# --- Database Exceptions ---


class DatabaseError(DirectoryError):
    """Base exception for database errors."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when the database connection fails."""
    pass


class DatabaseQueryError(DatabaseError):
    """Raised when a query against the store fails."""
    pass


# --- Resolution Exceptions ---


class ResolutionError(DirectoryError):
    """Base exception for path segment resolution errors."""
    pass


class AmbiguousSlugError(ResolutionError):
    """Raised when a segment names both a location and a specialization."""

    def __init__(self, segment: str, location: str, specialization: str):
        super().__init__(
            message=(
                f"Segment '{segment}' matches location '{location}' "
                f"and specialization '{specialization}'"
            ),
            details={
                "segment": segment,
                "location": location,
                "specialization": specialization,
            },
        )


class MalformedSegmentError(ResolutionError):
    """Raised when a path segment cannot be a slug at all (e.g. contains NUL)."""

    def __init__(self, segment: str):
        super().__init__(
            message="Malformed path segment",
            details={"segment": segment.replace("\x00", "\\x00")},
        )


# --- Validation Exceptions ---


class ValidationError(DirectoryError):
    """Base exception for input validation errors."""
    pass


class InvalidSortError(ValidationError):
    """Raised when an unknown sort order is requested."""

    def __init__(self, sort: str):
        super().__init__(
            message=f"Invalid sort order: '{sort}'",
            details={"sort": sort},
        )


class InvalidContactError(ValidationError):
    """Raised when a contact form submission is incomplete or invalid."""
    pass


# --- Notification Exceptions ---


class NotificationError(DirectoryError):
    """Base exception for email notification errors."""
    pass


class EmailConfigurationError(NotificationError):
    """Raised when no email transport is configured."""
    pass
