"""Error taxonomy shared by the write pipeline, the routers and the collaborators.

Every error carries the user-facing ``message`` that ends up in the
``{"success": false, "message": ...}`` payload. ``report_exception`` is the
error-tracking sink: it logs the failure and forwards it to Sentry (a no-op
when Sentry was never initialised).
"""
import logging

import sentry_sdk

logger = logging.getLogger(__name__)


class RasclatError(Exception):
    """Base class for errors that are turned into a JSON error payload."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def payload(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.cause is not None:
            body["error"] = str(self.cause)
        return body


class ValidationError(RasclatError):
    pass


class DuplicateKeyError(RasclatError):
    pass


class NotFoundError(RasclatError):
    pass


class StorageError(RasclatError):
    pass


class SearchIndexError(RasclatError):
    pass


class DecodeError(RasclatError):
    pass


class UpstreamError(RasclatError):
    """A third-party API could not be reached or answered with an error."""


class AuthError(RasclatError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def report_exception(exc: BaseException, **context) -> None:
    logger.error("%s: %s %s", type(exc).__name__, exc, context or "", exc_info=exc)
    sentry_sdk.capture_exception(exc)
