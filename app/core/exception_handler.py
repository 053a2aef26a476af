"""
DRF exception handler that renders domain errors.

Registered through REST_FRAMEWORK["EXCEPTION_HANDLER"]. Views let service
exceptions propagate; this handler turns any BaseApplicationError into a JSON
response using the error's own status code, and defers everything else to
DRF's default handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any


logger = logging.getLogger(__name__)


def application_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Render BaseApplicationError subclasses, fall back to DRF for the rest."""
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"Request failed: {exc.error_code}",
            extra={
                "error_code": exc.error_code,
                "status_code": exc.status_code,
                "view": view.__class__.__name__ if view else None,
            },
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return exception_handler(exc, context)
