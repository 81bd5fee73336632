"""Typed configuration loaded from config.yaml."""

from typing import Literal

from pydantic import BaseModel, Field

from src.infra.constants import COMMENT_SCHEMA, CommentObjectType

SslMode = Literal["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]


class DatabaseConfig(BaseModel):
    """Connection to the PostgreSQL server whose objects are commented."""

    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    username: str = "postgres"
    password: str | None = None
    sslmode: SslMode = "prefer"
    connect_timeout: int = 5


class CommentResourceConfig(BaseModel):
    """One declared ``postgresql_comment`` resource."""

    object_name: str = Field(description=COMMENT_SCHEMA.descriptions["object_name"])
    object_type: CommentObjectType = Field(
        description=COMMENT_SCHEMA.descriptions["object_type"]
    )
    database: str = Field(
        default=COMMENT_SCHEMA.DEFAULT_DATABASE,
        description=COMMENT_SCHEMA.descriptions["database"],
    )
    comment: str = Field(
        default=COMMENT_SCHEMA.DEFAULT_COMMENT,
        description=COMMENT_SCHEMA.descriptions["comment"],
    )


class ConfigData(BaseModel):
    """Top-level ``config:`` section."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    comments: list[CommentResourceConfig] = Field(default_factory=list)
