"""Comment resource state.

``ResourceData`` is the untyped per-resource state handed over by the host
engine; ``CommentResource`` is the typed view the controller works on.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.infra.constants import COMMENT_SCHEMA, CommentObjectType

from .errors import InvalidResourceId


class ResourceData:
    """Host-side state of one resource: raw attributes plus an id."""

    def __init__(
        self, attributes: Mapping[str, Any] | None = None, id: str = ""
    ) -> None:
        self._attributes: dict[str, Any] = dict(attributes or {})
        self._id = id

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        """Set the resource id; an empty id marks the resource as gone."""
        self._id = value

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)


class CommentResource(BaseModel):
    """A declared PostgreSQL object comment."""

    model_config = ConfigDict(validate_assignment=True)

    object_type: CommentObjectType
    object_name: str = Field(frozen=True)
    database: str = COMMENT_SCHEMA.DEFAULT_DATABASE
    comment: str = COMMENT_SCHEMA.DEFAULT_COMMENT
    id: str | None = None

    @field_validator("object_type", mode="before")
    @classmethod
    def _parse_object_type(cls, value: Any) -> CommentObjectType:
        return CommentObjectType.parse(value)

    @field_validator("object_name", "database", "comment")
    @classmethod
    def _reject_nul(cls, value: str) -> str:
        if "\x00" in value:
            raise ValueError("must not contain NUL characters")
        return value

    @classmethod
    def from_attributes(
        cls, attributes: Mapping[str, Any], id: str | None = None
    ) -> "CommentResource":
        """Build a typed resource from declared attributes.

        Missing optional attributes take their schema defaults.

        Raises:
            UnsupportedObjectType: If object_type is not a supported kind
            ValueError: If object_name is missing
        """
        s = COMMENT_SCHEMA
        name = attributes.get(s.NAME_ATTR)
        if not name:
            raise ValueError(f"{s.NAME_ATTR} is required")

        # Surface the configuration error as-is instead of a ValidationError
        object_type = CommentObjectType.parse(attributes.get(s.TYPE_ATTR))

        return cls(
            object_type=object_type,
            object_name=name,
            database=attributes.get(s.DATABASE_ATTR) or s.DEFAULT_DATABASE,
            comment=attributes.get(s.COMMENT_ATTR) or s.DEFAULT_COMMENT,
            id=id or None,
        )

    @classmethod
    def from_resource_data(cls, data: ResourceData) -> "CommentResource":
        return cls.from_attributes(data.attributes, id=data.id)

    def to_resource_data(self, data: ResourceData) -> ResourceData:
        """Write observed state back to the host-side resource."""
        s = COMMENT_SCHEMA
        data.set(s.NAME_ATTR, self.object_name)
        data.set(s.TYPE_ATTR, self.object_type.value)
        data.set(s.DATABASE_ATTR, self.database)
        data.set(s.COMMENT_ATTR, self.comment)
        data.set_id(self.id or "")
        return data

    @property
    def resource_id(self) -> str:
        """Get the composite id derived from database and object name."""
        return generate_comment_id(self.database, self.object_name)


def generate_comment_id(database: str, object_name: str) -> str:
    return COMMENT_SCHEMA.ID_SEPARATOR.join([database, object_name])


def parse_comment_id(resource_id: str) -> tuple[str, str]:
    """Split a composite id into (database, object_name) at the first separator.

    Raises:
        InvalidResourceId: If either part is missing
    """
    database, sep, object_name = resource_id.partition(COMMENT_SCHEMA.ID_SEPARATOR)
    if not sep or not database or not object_name:
        raise InvalidResourceId(resource_id)
    return database, object_name
