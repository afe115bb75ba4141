"""Domain error taxonomy shared by services, repositories and the API."""

from typing import Dict, Any


class PatriotThanksError(Exception):
    """Base exception for Patriot Thanks domain errors."""

    pass


class NotFoundError(PatriotThanksError):
    """Raised when an entity does not exist or has been soft-deleted."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} does not exist")


class ValidationFailure(PatriotThanksError):
    """Raised when required fields are missing or blank.

    ``errors`` maps each invalid field name to a short message. Rendering the
    messages is left to the caller.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid fields: {fields}")


class InvalidEmailError(PatriotThanksError):
    """Raised when an email address has no '@'."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Invalid email address: {email!r}")


class DuplicateDomainError(PatriotThanksError):
    """Raised by storage when a live school already uses a domain."""

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"A school with domain '{domain}' already exists")
