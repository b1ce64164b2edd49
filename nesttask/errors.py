"""Exception hierarchy shared by the store, services and HTTP layer."""


class NestTaskError(Exception):
    status_code = 500


class ValidationError(NestTaskError):
    status_code = 400


class PermissionDenied(NestTaskError):
    status_code = 403


class NotFoundError(NestTaskError):
    status_code = 404


class StoreError(NestTaskError):
    """A store call failed. ``conflict`` is set for constraint violations."""

    def __init__(self, message, conflict=False):
        super().__init__(message)
        self.conflict = conflict

    @property
    def status_code(self):
        return 409 if self.conflict else 500
