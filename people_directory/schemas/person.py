"""
Pydantic models for person records.

The remote directory speaks OData, so keys on the wire are PascalCase
(``UserName``, ``FirstName`` ...) while the models use snake_case field
names.  Incoming payloads are matched case‑insensitively because the
casing used by a given server is not guaranteed; ``UserName``,
``userName`` and ``user_name`` all land in the same field.  Outgoing
payloads are always produced with the PascalCase aliases.

``Person`` is immutable.  Use :meth:`Person.with_changes` to obtain a
modified copy before sending it back to the server.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def _normalise_key(key: str) -> str:
    return key.replace("_", "").lower()


class DirectoryModel(BaseModel):
    """Base class for models decoded from directory responses."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @model_validator(mode="before")
    @classmethod
    def match_keys(cls, data: Any) -> Any:
        # Map every incoming key onto a field name regardless of casing.
        # Keys that match nothing (``@odata.context`` etc.) are dropped.
        if not isinstance(data, dict):
            return data
        lookup: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            lookup[_normalise_key(name)] = name
            if field.alias:
                lookup[_normalise_key(field.alias)] = name
        matched: Dict[str, Any] = {}
        for key, value in data.items():
            name = lookup.get(_normalise_key(str(key)))
            if name is not None and name not in matched:
                matched[name] = value
        return matched


class Person(DirectoryModel):
    """One entry of the people directory.

    ``user_name`` is the key used for lookup, update and delete.  The
    remaining string fields default to an empty string because sparse
    payloads (for example ``{"UserName": "jdoe"}``) are common.
    """

    user_name: str = Field(..., alias="UserName", examples=["russellwhyte"])
    first_name: str = Field("", alias="FirstName", examples=["Russell"])
    last_name: str = Field("", alias="LastName", examples=["Whyte"])
    middle_name: Optional[str] = Field(None, alias="MiddleName")
    email: str = Field("", alias="Email", examples=["russell@example.com"])
    address: str = Field("", alias="Address", examples=["187 Suffolk Ln."])
    date_of_birth: Optional[date] = Field(None, alias="DateOfBirth", examples=["1980-02-14"])

    @field_validator("first_name", "last_name", "email", "address", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def strip_time(cls, value: Any) -> Any:
        # Servers may send an Edm.DateTimeOffset; only the date part is kept.
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def with_changes(self, **overrides: Any) -> "Person":
        """Return a copy of this person with the given fields replaced.

        Raises ``ValueError`` for unknown fields or for an attempt to
        change ``user_name``.
        """
        unknown = set(overrides) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown person fields: {', '.join(sorted(unknown))}")
        if "user_name" in overrides and overrides["user_name"] != self.user_name:
            raise ValueError("user_name identifies the person and cannot be changed")
        values = self.model_dump()
        values.update(overrides)
        return type(self)(**values)

    def to_payload(self) -> Dict[str, Any]:
        """Serialise to the JSON shape expected by the server."""
        return self.model_dump(mode="json", by_alias=True)


class PeopleEnvelope(DirectoryModel):
    """Collection response wrapper: ``{"value": [...]}``."""

    value: List[Person] = Field(default_factory=list)

    @field_validator("value", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value
