"""SQL for PostgreSQL object comments.

Pure functions that turn a declared comment into a ``COMMENT ON`` statement
and into the catalog query that reads the stored comment back.
"""

from src.infra.constants import CommentObjectType

_SQL_KEYWORDS: dict[CommentObjectType, str] = {
    CommentObjectType.DATABASE: "DATABASE",
    CommentObjectType.ROLE: "ROLE",
    CommentObjectType.TABLE: "TABLE",
}

# Database and role comments live in the shared catalog, table comments in the
# per-database one. Parameter placeholders use psycopg2 paramstyle.
_LOOKUP_QUERIES: dict[CommentObjectType, str] = {
    CommentObjectType.DATABASE: (
        "SELECT description FROM pg_catalog.pg_shdescription "
        "WHERE objoid = (SELECT oid FROM pg_database WHERE datname = %s);"
    ),
    CommentObjectType.ROLE: (
        "SELECT description FROM pg_catalog.pg_shdescription "
        "WHERE objoid = (SELECT oid FROM pg_roles WHERE rolname = %s);"
    ),
    CommentObjectType.TABLE: (
        "SELECT description FROM pg_catalog.pg_description "
        "WHERE objoid = (SELECT oid FROM pg_class WHERE relkind = 'r' and relname = %s);"
    ),
}


def quote_identifier(name: str) -> str:
    """Quote a string for use as a SQL identifier.

    Anything after an embedded NUL is dropped, since the server would
    truncate there anyway.

    Example:
        >>> quote_identifier("users")
        '"users"'
    """
    end = name.find("\x00")
    if end > -1:
        name = name[:end]
    return '"' + name.replace('"', '""') + '"'


def quote_literal(value: str) -> str:
    """Quote a string for use as a SQL string literal.

    Values containing a backslash are emitted as escape strings (``E'...'``)
    so they are read the same way regardless of standard_conforming_strings.

    Example:
        >>> quote_literal("it's")
        "'it''s'"
    """
    value = value.replace("'", "''")
    if "\\" in value:
        value = value.replace("\\", "\\\\")
        return " E'" + value + "'"
    return "'" + value + "'"


def sql_keyword(object_type: CommentObjectType | str) -> str:
    """Get the COMMENT ON keyword for an object type.

    Raises:
        UnsupportedObjectType: If the object type is not supported
    """
    return _SQL_KEYWORDS[CommentObjectType.parse(object_type)]


def requires_database_context(object_type: CommentObjectType | str) -> bool:
    """Whether statements for this object type must run inside its database."""
    return CommentObjectType.parse(object_type) is CommentObjectType.TABLE


def build_set_statement(
    object_type: CommentObjectType | str, object_name: str, comment_value: str
) -> str:
    """Build the statement that sets (or clears, with "") an object's comment.

    Args:
        object_type: Kind of object being commented
        object_name: Name of the object, quoted as an identifier
        comment_value: Comment text, quoted as a literal

    Returns:
        ``COMMENT ON <KEYWORD> <quoted-name> IS <quoted-literal>``

    Raises:
        UnsupportedObjectType: If the object type is not supported
    """
    keyword = sql_keyword(object_type)
    return (
        f"COMMENT ON {keyword} {quote_identifier(object_name)} "
        f"IS {quote_literal(comment_value)}"
    )


def build_lookup_query(object_type: CommentObjectType | str) -> str:
    """Get the catalog query returning an object's comment.

    The query takes the object name as its single parameter.

    Raises:
        UnsupportedObjectType: If the object type is not supported
    """
    return _LOOKUP_QUERIES[CommentObjectType.parse(object_type)]
