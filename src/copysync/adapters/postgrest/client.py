"""PostgREST (Supabase) implementation of the copy item store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PayloadValidationError

from copysync.adapters.http_resilience import ResilientClient, build_limiter
from copysync.config.postgrest import get_postgrest_config
from copysync.domain.reconciliation.errors import StoreError

from .schema import COPY_ITEM_ROWS, ErrorPayload
from .translator import insert_payload, patch_payload, row_to_record

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from aiolimiter import AsyncLimiter

    from copysync.config.postgrest import PostgrestConfig
    from copysync.domain.model import CopyPatch, CopyRecord, NewCopyRecord, Scope

log = getLogger(__name__)

_RETURN_REPRESENTATION = {"Prefer": "return=representation"}
_RETURN_MINIMAL = {"Prefer": "return=minimal"}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _in_filter(values: Sequence[str]) -> str:
    quoted = ",".join('"' + value.replace('"', '\\"') + '"' for value in values)
    return f"in.({quoted})"


@dataclass(slots=True)
class PostgrestCopyItemStore:
    """Copy item store talking to a PostgREST endpoint.

    Each call opens its own short-lived client; all of them share one rate limiter.
    """

    config: PostgrestConfig = field(default_factory=get_postgrest_config)
    transport: httpx.AsyncBaseTransport | None = None
    clock: Callable[[], datetime] = field(default=_utcnow)
    _limiter: AsyncLimiter | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        self._limiter = build_limiter(self.config.resilience.rate_limit)

    async def fetch_all(self, scope: Scope) -> list[CopyRecord]:
        """Read every row of ``scope``, one ``page_size`` page at a time."""

        page_size = self.config.page_size
        records: list[CopyRecord] = []
        while True:
            payload = await self._request(
                "GET",
                params={
                    "select": "*",
                    "site_id": f"eq.{scope.site_id}",
                    "user_id": f"eq.{scope.user_id}",
                    "order": "created_at.asc,id.asc",
                    "limit": str(page_size),
                    "offset": str(len(records)),
                },
            )
            page = self._parse_records(payload)
            records.extend(page)
            if len(page) < page_size:
                return records

    async def insert_many(self, records: Sequence[NewCopyRecord]) -> list[CopyRecord]:
        if not records:
            return []
        payload = await self._request(
            "POST",
            json=[insert_payload(record) for record in records],
            headers=_RETURN_REPRESENTATION,
        )
        created = self._parse_records(payload)
        if len(created) != len(records):
            raise StoreError(
                f"Inserted {len(records)} copy items but {len(created)} were returned"
            )
        return created

    async def update_one(self, record_id: str, patch: CopyPatch) -> None:
        body = patch_payload(patch)
        body["updated_at"] = self.clock().isoformat()
        await self._request(
            "PATCH",
            params={"id": f"eq.{record_id}"},
            json=body,
            headers=_RETURN_MINIMAL,
        )

    async def delete_many(self, record_ids: Sequence[str]) -> None:
        if not record_ids:
            return
        await self._request(
            "DELETE",
            params={"id": _in_filter(record_ids)},
            headers=_RETURN_MINIMAL,
        )

    async def _request(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: object = None,
        headers: dict[str, str] | None = None,
    ) -> object:
        table = self.config.table
        try:
            async with ResilientClient(
                self.config.resilience, transport=self.transport, limiter=self._limiter
            ) as client:
                response = await client.request(
                    method,
                    table,
                    params=params,
                    json=json,
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            log.error(f"PostgREST {method} {table} failed: {exc}")
            raise StoreError(f"Request to {table} failed: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            log.error(f"PostgREST {method} {table} returned {response.status_code}: {message}")
            raise StoreError(message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(f"Invalid JSON from {table}") from exc

    @staticmethod
    def _parse_records(payload: object) -> list[CopyRecord]:
        try:
            rows = COPY_ITEM_ROWS.validate_python(payload if payload is not None else [])
        except PayloadValidationError as exc:
            raise StoreError(f"Unexpected copy item payload: {exc.error_count()} errors") from exc
        return [row_to_record(row) for row in rows]


def _error_message(response: httpx.Response) -> str:
    try:
        error = ErrorPayload.model_validate(response.json())
    except (ValueError, PayloadValidationError):
        return f"HTTP {response.status_code}: {response.text or response.reason_phrase}"
    return error.message


if TYPE_CHECKING:
    from copysync.domain.ports import CopyItemStore

    _store_check: CopyItemStore = PostgrestCopyItemStore()
