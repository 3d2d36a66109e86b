"""Shared base for read schemas built from ORM rows."""

from collections.abc import Iterable
from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Read-side schema populated from ORM attributes."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )

    @classmethod
    def from_orm_list(cls, rows: Iterable[Any]) -> list[Self]:
        return [cls.model_validate(row) for row in rows]
