"""Pydantic models describing PostgREST payloads of the ``copywriting`` table."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from copysync.domain.model import CopyStatus, CopyType


def _none_to_empty(value: object) -> object:
    return "" if value is None else value


class PostgrestBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CopyItemRow(PostgrestBaseModel):
    id: str
    site_id: str
    user_id: str
    title: str = ""
    content: str = ""
    copy_type: CopyType = CopyType.OTHER
    target_audience: str | None = None
    use_case: str | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    status: CopyStatus = CopyStatus.DRAFT
    created_at: datetime | None = None
    updated_at: datetime | None = None

    _normalize_text = field_validator("title", "content", mode="before")(_none_to_empty)

    @field_validator("id", "site_id", "user_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        # uuid and bigint primary keys both arrive as JSON scalars
        if isinstance(value, int | float):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("copy_type", mode="before")
    @classmethod
    def _default_copy_type(cls, value: object) -> CopyType:
        # the column is free text; unknown categories are read as "other"
        try:
            return CopyType(value)
        except ValueError:
            return CopyType.OTHER

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: object) -> CopyStatus:
        try:
            return CopyStatus(value)
        except ValueError:
            return CopyStatus.DRAFT


class ErrorPayload(PostgrestBaseModel):
    message: str
    code: str | None = None
    details: str | None = None
    hint: str | None = None


COPY_ITEM_ROWS: TypeAdapter[list[CopyItemRow]] = TypeAdapter(list[CopyItemRow])
