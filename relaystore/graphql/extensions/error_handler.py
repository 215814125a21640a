import logging
from typing import Any

from graphql.error import GraphQLError
from strawberry.extensions import SchemaExtension

from relaystore.core.exceptions import APIException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = (
    "An unexpected error occurred. Please contact support if the issue persists."
)


class CustomErrorHandler(SchemaExtension):
    """Rewrites execution errors into client-safe errors carrying an `extensions.code`."""

    def on_operation(self):
        yield  # Let the operation run first

        execution_context = self.execution_context
        result = execution_context.result
        if not result or not getattr(result, "errors", None):
            return

        processed_errors: list[GraphQLError] = []
        for error in result.errors:
            original_error = getattr(error, "original_error", None)

            # Syntax and validation errors from graphql-core are already client-safe
            if original_error is None or isinstance(original_error, GraphQLError):
                processed_errors.append(error)
                continue

            extensions: dict[str, Any] = dict(error.extensions or {})
            if isinstance(original_error, APIException):
                logger.info(
                    f"GraphQL request error: {original_error.message}",
                    extra={
                        "props": {
                            "code": original_error.code,
                            "path": error.path,
                            "operation_name": execution_context.operation_name,
                        }
                    },
                )
                user_message = original_error.message
                extensions["code"] = original_error.code
                field = getattr(original_error, "field", None)
                if field:
                    extensions["field"] = field
            else:
                # Log the original error with stack trace for internal debugging
                logger.error(
                    f"GraphQL Error: {error.message}",
                    exc_info=original_error,
                    extra={
                        "props": {
                            "path": error.path,
                            "locations": [
                                {"line": loc.line, "column": loc.column}
                                for loc in error.locations
                            ]
                            if error.locations
                            else None,
                            "operation_name": execution_context.operation_name,
                            "variables": execution_context.variables,
                        }
                    },
                )
                user_message = INTERNAL_ERROR_MESSAGE
                extensions["code"] = "INTERNAL_SERVER_ERROR"

            # Reuse the original locations and path, but never expose the original error
            processed_errors.append(
                GraphQLError(
                    message=user_message,
                    nodes=error.nodes,
                    source=error.source,
                    positions=error.positions,
                    path=error.path,
                    original_error=None,
                    extensions=extensions,
                )
            )

        result.errors = processed_errors
