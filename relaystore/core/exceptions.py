"""
Core exceptions for the application.

Every error carries a stable ``code`` which the GraphQL error handler copies
into the ``extensions`` of the reported error.
"""


class APIException(Exception):
    """Base class for API exceptions."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class DecodeError(APIException):
    """Raised when an opaque global ID cannot be decoded."""

    code = "INVALID_ID"

    def __init__(self, message: str = "Invalid global ID"):
        super().__init__(message)


class InvalidIDError(DecodeError):
    """Raised when a client-supplied global ID is malformed or of the wrong type."""

    def __init__(self, message: str = "Invalid global ID", global_id: str | None = None):
        self.global_id = global_id
        super().__init__(message)


class NotFoundError(APIException):
    """Raised when a requested resource is not found."""

    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class UnknownTypeError(DecodeError, NotFoundError):
    """Raised when a global ID names a type that is not registered."""

    code = "UNKNOWN_TYPE"

    def __init__(self, type_tag: str):
        self.type_tag = type_tag
        super().__init__(f"Unknown node type '{type_tag}'")


class InvalidCursorError(APIException):
    """Raised for malformed cursors or cursors issued under another ordering."""

    code = "INVALID_CURSOR"

    def __init__(self, message: str = "Invalid cursor"):
        super().__init__(message)


class DuplicateRegistrationError(APIException):
    """Raised when a node type tag is registered twice."""

    code = "DUPLICATE_REGISTRATION"

    def __init__(self, type_tag: str):
        self.type_tag = type_tag
        super().__init__(f"Node type '{type_tag}' is already registered")


class RegistryFrozenError(APIException):
    """Raised when registering after the node registry was frozen."""

    code = "REGISTRY_FROZEN"

    def __init__(self, type_tag: str):
        self.type_tag = type_tag
        super().__init__(f"Cannot register '{type_tag}': node registry is frozen")


class ConflictingArgumentsError(APIException):
    """Raised when `first` and `last` are supplied together."""

    code = "CONFLICTING_ARGUMENTS"

    def __init__(self, message: str = "Passing both `first` and `last` is not supported"):
        super().__init__(message)


class InvalidArgumentError(APIException):
    """Raised for out-of-range pagination arguments."""

    code = "INVALID_ARGUMENT"

    def __init__(self, message: str = "Invalid argument", field: str | None = None):
        self.field = field
        super().__init__(message)
