"""
Domain errors shared by feature packages.

Repositories and stores raise these; the service layer turns them into
HTTP errors.
"""

from __future__ import annotations


class NotFoundError(RuntimeError):
    pass


class ConflictError(RuntimeError):
    pass


# Raised by record stores on a unique constraint violation.
class DuplicateKeyError(RuntimeError):
    pass
