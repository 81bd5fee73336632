"""PostgreSQL comment resource.

Implements the create/read/update/delete/exists lifecycle of a declared
``postgresql_comment`` resource. Each operation runs its statement or lookup
in its own short transaction and refreshes the in-memory resource state.
"""

import psycopg2
from loguru import logger

from src.infra.constants import COMMENT_SCHEMA, CommentObjectType

from .comment_sql import (
    build_lookup_query,
    build_set_statement,
    requires_database_context,
)
from .connection import PostgresConnection
from .errors import FeatureUnsupported, StatementExecutionError
from .features import Feature
from .resource import CommentResource, parse_comment_id


class PostgresComment:
    """Manages comments on PostgreSQL databases, roles and tables.

    This includes:
    - Setting a comment (create/update)
    - Reading the stored comment back (read/exists)
    - Clearing the comment when the resource is removed (delete)
    - Importing an existing comment by id
    """

    def __init__(self, connection: PostgresConnection) -> None:
        self._connection = connection

    def create(self, resource: CommentResource) -> CommentResource:
        """Set the declared comment and refresh the resource.

        Raises:
            FeatureUnsupported: If the server does not support comments
            TransactionError: If the transaction cannot be opened
            StatementExecutionError: If COMMENT ON fails
            CommitError: If the commit fails
        """
        self._check_supported()
        self._set_comment(resource, resource.comment, action="creating")
        return self._read_impl(resource)

    def read(self, resource: CommentResource) -> CommentResource:
        """Refresh the resource from the catalog.

        An object without a stored comment reads back as "".
        """
        self._check_supported()
        return self._read_impl(resource)

    def exists(self, resource: CommentResource) -> bool:
        """Check that the stored comment matches the declared one.

        Returns:
            False when no comment is stored or it differs from the declared
            value (drift), True otherwise
        """
        description = self._get_comment(resource)
        if description is None:
            return False

        if description != resource.comment:
            logger.warning(
                f"Comment on {resource.object_type.value} {resource.object_name} "
                f"differs from declared value"
            )
            return False

        return True

    def update(
        self, resource: CommentResource, new_value: str | None = None
    ) -> CommentResource:
        """Set a new comment value and refresh the resource.

        Args:
            resource: The resource to update
            new_value: Comment to set (default: the resource's declared comment)
        """
        self._check_supported()
        value = resource.comment if new_value is None else new_value
        self._set_comment(resource, value, action="updating")
        return self._read_impl(resource)

    def delete(self, resource: CommentResource) -> CommentResource:
        """Clear the comment so the object carries no residual annotation."""
        self._check_supported()
        self._set_comment(resource, COMMENT_SCHEMA.DEFAULT_COMMENT, action="deleting")
        resource.comment = COMMENT_SCHEMA.DEFAULT_COMMENT
        resource.id = None
        return resource

    def import_state(
        self, resource_id: str, object_type: CommentObjectType | str
    ) -> CommentResource:
        """Build a resource from an existing ``<database>.<object_name>`` id.

        Raises:
            InvalidResourceId: If the id is malformed
            UnsupportedObjectType: If the object type is not supported
        """
        database, object_name = parse_comment_id(resource_id)
        resource = CommentResource(
            object_type=CommentObjectType.parse(object_type),
            object_name=object_name,
            database=database,
        )
        return self.read(resource)

    def _check_supported(self) -> None:
        conn = self._connection
        if not conn.feature_supported(Feature.COMMENT):
            raise FeatureUnsupported(COMMENT_SCHEMA.RESOURCE_TYPE, conn.version)

    def _read_impl(self, resource: CommentResource) -> CommentResource:
        description = self._get_comment(resource)
        resource.comment = description or COMMENT_SCHEMA.DEFAULT_COMMENT
        resource.id = resource.resource_id
        return resource

    def _set_comment(
        self, resource: CommentResource, value: str, *, action: str
    ) -> None:
        """Run COMMENT ON in its own transaction.

        Database and role comments are not scoped to a database, so they run
        on the default connection database.
        """
        statement = build_set_statement(
            resource.object_type, resource.object_name, value
        )
        database = (
            resource.database
            if requires_database_context(resource.object_type)
            else None
        )

        with self._connection.start_transaction(database) as txn:
            try:
                txn.execute(statement)
            except psycopg2.Error as e:
                raise StatementExecutionError(
                    f"Error {action} comment: {e}",
                    details=statement,
                ) from e
            txn.commit()

        logger.info(f"Applied on {txn.database}: {statement}")

    def _get_comment(self, resource: CommentResource) -> str | None:
        """Look up the stored comment, or None when there is none."""
        query = build_lookup_query(resource.object_type)

        with self._connection.start_transaction(resource.database) as txn:
            logger.debug(f"Looking up comment for {resource.object_name}: {query}")
            try:
                return txn.fetch_scalar(query, (resource.object_name,))
            except psycopg2.Error as e:
                raise StatementExecutionError(
                    f"Error reading comment: {e}", details=query
                ) from e
