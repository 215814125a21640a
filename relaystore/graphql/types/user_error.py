import strawberry


# Base User Error Interface
@strawberry.interface
class UserError:
    message: str
    code: str | None = None
    field: str | None = None  # Optional field identifier


# Concrete Error Implementations
@strawberry.type
class InputValidationError(UserError):
    code: str = "INVALID_INPUT"
    field: str | None = None  # Specific field causing the error


@strawberry.type
class InvalidIDUserError(UserError):
    code: str = "INVALID_ID"
    field: str | None = None


@strawberry.type
class NotFoundError(UserError):
    code: str = "NOT_FOUND"
    field: str | None = None  # e.g., the ID field for the resource not found


@strawberry.type
class InternalServerError(UserError):
    message: str = "An internal server error occurred."
    code: str = "INTERNAL_SERVER_ERROR"
    field: str | None = None
