from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

__all__ = ["Record"]


class Record(BaseModel):
    """A student row: engine-assigned ``id`` plus a required ``name``.

    ``id`` stays ``None`` until the store has persisted the record. Records are
    frozen; use :meth:`with_name` and an explicit update to change a stored row.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    name: str

    @field_validator("name")
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name must be a non-empty string")
        return value

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def same_entity(self, other: Record) -> bool:
        """Return True when both records carry the same persisted id."""

        return self.id is not None and self.id == other.id

    # model_copy skips validation, so both go through the constructor
    def with_id(self, record_id: int) -> Record:
        return Record(id=record_id, name=self.name)

    def with_name(self, name: str) -> Record:
        return Record(id=self.id, name=name)

    def __str__(self) -> str:
        return f"Student{{id={self.id}, name='{self.name}'}}"
