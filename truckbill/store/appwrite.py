"""Appwrite TablesDB REST client implementing the RowStore interface."""

import json
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

import httpx
import structlog

from truckbill.store.base import CREATED_AT, Row, new_row_id
from truckbill.store.exceptions import RowConflict, RowNotFound, RowStoreError
from truckbill.utils.request_retry import RequestRetryConfig, get_read_retrying

logger = structlog.get_logger(__name__)

# Appwrite system attributes are "$"-prefixed; everything else is row data
_SYSTEM_PREFIX = "$"


def _query(method: str, attribute: str | None = None, values: list[Any] | None = None) -> str:
    """Encode a single Appwrite query as the JSON string the REST API expects."""
    query: dict[str, Any] = {"method": method}
    if attribute is not None:
        query["attribute"] = attribute
    if values is not None:
        query["values"] = values
    return json.dumps(query, separators=(",", ":"))


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


class AppwriteRowStore:
    """RowStore talking to an Appwrite ``/tablesdb`` endpoint over httpx.

    Reads (get/list) are retried on network and gateway errors. Mutations are sent once:
    a lost response to an increment must not turn into a double increment.
    """

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        database_id: str,
        api_key: str = "",
        *,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
        retry_config: RequestRetryConfig | None = None,
    ):
        if not endpoint or not project_id or not database_id:
            raise ValueError("Appwrite endpoint, project and database must be configured")

        self.database_id = database_id
        self._retry_config = retry_config
        self._owns_client = client is None

        headers = {
            "X-Appwrite-Project": project_id,
            "Content-Type": "application/json",
        }
        if api_key:
            headers["X-Appwrite-Key"] = api_key

        if client is None:
            client = httpx.AsyncClient(base_url=endpoint.rstrip("/"), timeout=timeout)
        client.headers.update(headers)
        self._client = client

    def _rows_path(self, table: str) -> str:
        return f"/tablesdb/{self.database_id}/tables/{table}/rows"

    def _row_path(self, table: str, row_id: str) -> str:
        return f"{self._rows_path(table)}/{row_id}"

    @staticmethod
    def _to_row(payload: Mapping[str, Any]) -> Row:
        return Row(
            id=payload["$id"],
            data={k: v for k, v in payload.items() if not k.startswith(_SYSTEM_PREFIX)},
            created_at=_parse_datetime(payload.get("$createdAt")),
            updated_at=_parse_datetime(payload.get("$updatedAt")),
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response, table: str, row_id: str | None = None) -> None:
        if response.is_success:
            return

        message = response.text
        try:
            message = response.json().get("message", message)
        except ValueError:
            pass

        if response.status_code == 404 and row_id is not None:
            raise RowNotFound(table, row_id)
        if response.status_code == 409 and row_id is not None:
            raise RowConflict(table, row_id)

        logger.error(
            "Appwrite request failed",
            method=response.request.method,
            url=str(response.request.url),
            status_code=response.status_code,
            error=message,
        )
        raise RowStoreError(f"Appwrite returned {response.status_code}: {message}")

    async def _send(self, method: str, path: str, *, retry: bool, **kwargs: Any) -> httpx.Response:
        try:
            if retry:
                response: httpx.Response = await get_read_retrying(self._retry_config)(
                    self._client.request, method, path, **kwargs
                )
            else:
                response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Appwrite unreachable", method=method, path=path, error=str(e))
            raise RowStoreError(f"Appwrite request failed: {e}") from e
        return response

    async def get_row(self, table: str, row_id: str) -> Row:
        response = await self._send("GET", self._row_path(table, row_id), retry=True)
        self._raise_for_status(response, table, row_id)
        return self._to_row(response.json())

    async def create_row(self, table: str, row_id: str | None, data: Mapping[str, Any]) -> Row:
        row_id = row_id or new_row_id()
        response = await self._send(
            "POST",
            self._rows_path(table),
            retry=False,
            json={"rowId": row_id, "data": dict(data)},
        )
        self._raise_for_status(response, table, row_id)
        return self._to_row(response.json())

    async def update_row(self, table: str, row_id: str, data: Mapping[str, Any]) -> Row:
        response = await self._send(
            "PATCH",
            self._row_path(table, row_id),
            retry=False,
            json={"data": dict(data)},
        )
        self._raise_for_status(response, table, row_id)
        return self._to_row(response.json())

    async def delete_row(self, table: str, row_id: str) -> None:
        response = await self._send("DELETE", self._row_path(table, row_id), retry=False)
        self._raise_for_status(response, table, row_id)

    async def list_rows(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> Sequence[Row]:
        queries = [_query("equal", name, [value]) for name, value in (filters or {}).items()]
        if order_by is not None:
            attribute = "$createdAt" if order_by == CREATED_AT else order_by
            queries.append(_query("orderDesc" if descending else "orderAsc", attribute))
        if limit is not None:
            queries.append(_query("limit", values=[limit]))

        response = await self._send(
            "GET",
            self._rows_path(table),
            retry=True,
            params=[("queries[]", q) for q in queries],
        )
        self._raise_for_status(response, table)
        return [self._to_row(item) for item in response.json().get("rows", [])]

    async def increment_column(self, table: str, row_id: str, column: str, delta: int = 1) -> Row:
        response = await self._send(
            "PATCH",
            f"{self._row_path(table, row_id)}/{column}/increment",
            retry=False,
            json={"value": delta},
        )
        self._raise_for_status(response, table, row_id)
        return self._to_row(response.json())

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
