# Mapping of application exceptions to GraphQL UserErrors for mutation payloads.

import logging

from pydantic import ValidationError

from relaystore.core.exceptions import APIException, InvalidIDError
from relaystore.core.exceptions import NotFoundError as NotFoundException

from .types.user_error import (
    InputValidationError,
    InternalServerError,
    InvalidIDUserError,
    NotFoundError,
    UserError,
)

logger = logging.getLogger(__name__)


def map_exception_to_user_errors(
    exc: Exception, field: str | None = None
) -> list[UserError]:
    """Maps a caught exception to a list of UserError types for mutation payloads."""
    logger.debug(
        f"Mapping exception to UserError: {type(exc).__name__}: {exc}", exc_info=True
    )

    if isinstance(exc, ValidationError):
        return [
            InputValidationError(
                message=error["msg"],
                field=".".join(str(part) for part in error["loc"]) or field,
            )
            for error in exc.errors()
        ]
    if isinstance(exc, InvalidIDError):
        return [InvalidIDUserError(message=exc.message, field=field)]
    if isinstance(exc, NotFoundException):
        return [NotFoundError(message=exc.message, field=field)]
    if isinstance(exc, APIException):
        return [InputValidationError(message=exc.message, code=exc.code, field=field)]

    # Log unhandled exceptions with full traceback for diagnosis
    logger.exception(
        f"Unhandled exception mapped to InternalServerError: {type(exc).__name__}: {exc}"
    )
    return [InternalServerError()]
