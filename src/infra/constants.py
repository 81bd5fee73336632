"""Comment resource constants and configuration.

This module centralizes the attribute names, defaults and paths shared by the
SQL translator, the resource controller and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from src.utils.paths import get_project_root


class CommentObjectType(str, Enum):
    """PostgreSQL object kinds that can carry a managed comment."""

    DATABASE = "database"
    ROLE = "role"
    TABLE = "table"

    @classmethod
    def parse(cls, value: str | CommentObjectType) -> CommentObjectType:
        """Coerce a declared value into a supported object type.

        Raises:
            UnsupportedObjectType: If the value is not a supported kind
        """
        from src.infra.postgres.errors import UnsupportedObjectType

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedObjectType(value) from None

    @classmethod
    def allowed_values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


@dataclass(frozen=True)
class CommentSchema:
    """Declared attributes of the comment resource.

    All attributes are class-level and immutable.
    """

    # Attribute names
    NAME_ATTR: str = "object_name"
    TYPE_ATTR: str = "object_type"
    DATABASE_ATTR: str = "database"
    COMMENT_ATTR: str = "comment"

    # Defaults
    DEFAULT_DATABASE: str = "postgres"
    DEFAULT_COMMENT: str = ""

    # Composite id is "<database><ID_SEPARATOR><object_name>"
    ID_SEPARATOR: str = "."

    # Resource type name as seen by the host engine
    RESOURCE_TYPE: str = "postgresql_comment"

    @property
    def attributes(self) -> tuple[str, ...]:
        """Get all declared attribute names."""
        return (
            self.NAME_ATTR,
            self.TYPE_ATTR,
            self.DATABASE_ATTR,
            self.COMMENT_ATTR,
        )

    @property
    def force_new_attributes(self) -> tuple[str, ...]:
        """Attributes whose change requires replacing the resource."""
        return (self.NAME_ATTR,)

    @property
    def descriptions(self) -> dict[str, str]:
        """Get the human readable description of each attribute."""
        allowed = ", ".join(CommentObjectType.allowed_values())
        return {
            self.NAME_ATTR: "The object upon which to comment",
            self.TYPE_ATTR: f"The PostgreSQL object type to comment on (one of: {allowed})",
            self.DATABASE_ATTR: "The database to connect to. Mandatory for database objects (eg. table).",
            self.COMMENT_ATTR: "Comment to set on the object",
        }


class ProjectPaths:
    """Path resolver for project files, derived from the project root."""

    def __init__(self, project_root: Path) -> None:
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get path to project root."""
        return self._project_root

    @property
    def config_yaml(self) -> Path:
        """Get path to config.yaml."""
        return self.project_root / "config.yaml"

    @property
    def env_file(self) -> Path:
        """Get path to .env file."""
        return self.project_root / ".env"


COMMENT_SCHEMA = CommentSchema()
DEFAULT_PATHS = ProjectPaths(project_root=get_project_root())
