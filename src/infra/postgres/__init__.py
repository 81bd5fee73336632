"""PostgreSQL comment management infrastructure.

This module provides Python implementations for managing comments on
PostgreSQL databases, roles and tables as declared resources, including
connection management, scoped transactions, server feature gating and the
SQL used to set and read comments.

These are used by the CLI `comment` commands.
"""

from .comment import PostgresComment
from .connection import DbSettings, PostgresConnection
from .errors import (
    CommentError,
    CommitError,
    FeatureUnsupported,
    InvalidResourceId,
    StatementExecutionError,
    TransactionError,
    UnsupportedObjectType,
)
from .features import Feature
from .resource import CommentResource, ResourceData
from .transaction import Transaction

__all__ = [
    "DbSettings",
    "PostgresConnection",
    "PostgresComment",
    "Transaction",
    "Feature",
    "CommentResource",
    "ResourceData",
    "CommentError",
    "CommitError",
    "FeatureUnsupported",
    "InvalidResourceId",
    "StatementExecutionError",
    "TransactionError",
    "UnsupportedObjectType",
]
