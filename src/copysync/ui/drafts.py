"""Pydantic models for draft lists supplied by editors (JSON files, form posts)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from copysync.domain.model import CopyDraft, CopyStatus, CopyType

if TYPE_CHECKING:
    from pathlib import Path


class DraftPayload(BaseModel):
    """One edited copy item, using the storage column names as aliases."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = None
    title: str = ""
    body: str = Field(default="", alias="content")
    category: CopyType = Field(default=CopyType.OTHER, alias="copy_type")
    audience: str | None = Field(default=None, alias="target_audience")
    use_case: str | None = None
    notes: str | None = None
    labels: list[str] = Field(default_factory=list, alias="tags")
    status: CopyStatus = CopyStatus.DRAFT

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("title", "body", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("labels", mode="before")
    @classmethod
    def _default_labels(cls, value: object) -> object:
        return [] if value is None else value

    def to_draft(self) -> CopyDraft:
        return CopyDraft(
            id=self.id,
            title=self.title,
            body=self.body,
            category=self.category,
            audience=self.audience,
            use_case=self.use_case,
            notes=self.notes,
            labels=frozenset(self.labels),
            status=self.status,
        )


DRAFT_LIST: TypeAdapter[list[DraftPayload]] = TypeAdapter(list[DraftPayload])


def parse_drafts(payload: object) -> list[CopyDraft]:
    """Validate a decoded JSON array (or ``{"copywriting": [...]}`` object)."""

    if isinstance(payload, dict) and "copywriting" in payload:
        payload = payload["copywriting"]
    return [item.to_draft() for item in DRAFT_LIST.validate_python(payload)]


def load_drafts(path: Path) -> list[CopyDraft]:
    with path.open(encoding="utf-8") as handle:
        payload = json.load(handle)
    return parse_drafts(payload)
