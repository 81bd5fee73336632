"""Errors raised by comment resource operations."""


class CommentError(Exception):
    """Base class for comment resource failures."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class UnsupportedObjectType(CommentError, ValueError):
    """Raised when a declared object_type is not a supported kind."""

    def __init__(self, object_type: object):
        self.object_type = object_type
        super().__init__(f"{object_type} is not supported")


class FeatureUnsupported(CommentError):
    """Raised when the connected server predates a required feature."""

    def __init__(self, resource_type: str, version: str):
        self.version = version
        super().__init__(
            f"{resource_type} resource is not supported for this Postgres version ({version})"
        )


class TransactionError(CommentError):
    """Raised when a connection or transaction cannot be opened."""


class StatementExecutionError(CommentError):
    """Raised when a statement or catalog lookup fails to execute."""


class CommitError(CommentError):
    """Raised when commit fails after a statement executed successfully."""


class InvalidResourceId(CommentError, ValueError):
    """Raised when an imported id is not of the form <database>.<object_name>."""

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(
            f"Invalid comment id '{resource_id}', expected <database>.<object_name>"
        )
