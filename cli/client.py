from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the readings service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def routes(self) -> Dict[str, Any]:
        return self._request("GET", "/routes")

    def save(self, values: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._request("POST", "/data", json=values)
        if not isinstance(payload.get("id"), str):
            raise typer.BadParameter("Unexpected response payload when saving data.")
        return payload

    def list_readings(
        self,
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {
            key: value
            for key, value in (("limit", limit), ("orderBy", order_by), ("order", order))
            if value is not None
        }
        return self._request("GET", "/data", params=params)

    def get_reading(self, reading_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/data/{reading_id}", not_found_id=reading_id)

    def latest(self) -> Dict[str, Any]:
        return self._request("GET", "/data/latest")

    def range(self, start_date: str, end_date: str, limit: Optional[int] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"startDate": start_date, "endDate": end_date}
        if limit is not None:
            params["limit"] = limit
        return self._request("GET", "/data/range", params=params)

    def delete(self, reading_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/data/{reading_id}", not_found_id=reading_id)

    def _request(
        self,
        method: str,
        path: str,
        not_found_id: Optional[str] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            if response.status_code == 404 and not_found_id is not None:
                raise typer.BadParameter(f"Reading {not_found_id} was not found.")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("error")
            if data.get("message"):
                detail = f"{detail} ({data['message']})"
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
