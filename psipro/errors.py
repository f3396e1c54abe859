"""Exception hierarchy shared by the scheduling core and its collaborators."""

from __future__ import annotations

from typing import Optional


class PsiProError(Exception):
    """Base exception for PsiPro errors."""

    pass


class ConflictError(PsiProError):
    """Candidate interval overlaps a non-cancelled appointment on the same date."""

    def __init__(self, message: str, conflicting_id: Optional[str] = None):
        super().__init__(message)
        self.conflicting_id = conflicting_id


class AppointmentValidationError(PsiProError):
    """Request rejected before any persistence attempt."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AppointmentNotFoundError(PsiProError):
    """Appointment id is not part of the owner's collection."""

    pass


class AuthError(PsiProError):
    """No valid session; the caller must re-authenticate."""

    pass


class StorageError(PsiProError):
    """Opaque failure from the record store, wrapped with context."""

    def __init__(self, message: str, context: str = "", code: Optional[str] = None):
        super().__init__(f"{context}: {message}" if context else message)
        self.context = context
        self.code = code
