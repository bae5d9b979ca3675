"""Base class for domain errors.

Domain errors are raised by the Service Layer and the pure domain
components (state machine, validators).  Each subclass declares the
HTTP status it maps to and a default client-facing message; the API
boundary turns them into the uniform response envelope.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Root of the domain error taxonomy."""

    status_code: int = 400
    default_message: str = "Request could not be processed."

    def __init__(
        self, message: Optional[str] = None, data: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message or self.default_message
        self.data: Dict[str, Any] = dict(data or {})
        super().__init__(self.message)
