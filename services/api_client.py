"""
REST client for the company store (``/companies`` and ``/companies/:id``).
"""
from __future__ import annotations

import logging
import time
from typing import Any, List, Optional

import requests

from config.settings import Settings, get_settings
from models.company_record import CompanyRecord
from services.errors import StoreStatusError, StoreTimeoutError, StoreUnavailableError


class CompanyApiClient:
    """Talks to the json-server style company store.

    Only the bulk load is bound by ``api_timeout_seconds``; create, update
    and delete wait for the store unless a mutation timeout is configured.
    Nothing is retried.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = (base_url or self.settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else self.settings.api_timeout_seconds
        self.mutation_timeout = self.settings.api_mutation_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, *, action: str, timeout: Optional[float], json: Any = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        t0 = time.time()
        try:
            response = self.session.request(method, url, json=json, timeout=timeout)
        except requests.exceptions.Timeout as e:
            logging.error(
                f"{method} {path} timed out after {timeout}s",
                extra={"action": action, "status": "timeout", "error": str(e)},
            )
            raise StoreTimeoutError("Request timeout - server is not responding") from e
        except requests.exceptions.RequestException as e:
            logging.error(
                f"{method} {path} failed: {e}",
                extra={"action": action, "status": "error", "error": str(e)},
            )
            raise StoreUnavailableError(f"Could not reach company store at {self.base_url}: {e}") from e

        duration_ms = int((time.time() - t0) * 1000)
        logging.info(
            f"{method} {path} -> {response.status_code}",
            extra={"action": action, "status": response.status_code, "duration_ms": duration_ms},
        )
        return response

    @staticmethod
    def _check(response: requests.Response, message: str) -> None:
        if not response.ok:
            raise StoreStatusError(
                f"{message}: {response.status_code} {response.reason or ''}".rstrip(),
                status_code=response.status_code,
                reason=response.reason,
            )

    def list_companies(self) -> List[CompanyRecord]:
        response = self._request("GET", "/companies", action="load", timeout=self.timeout)
        self._check(response, "Failed to fetch companies data")
        # JSON decode and pydantic validation errors are both ValueErrors
        try:
            data = response.json()
            if not isinstance(data, list):
                raise ValueError("expected a JSON array")
            return [CompanyRecord.model_validate(item) for item in data]
        except ValueError as e:
            raise StoreStatusError(
                f"Failed to fetch companies data: {e}",
                status_code=response.status_code,
                reason=response.reason,
            ) from e

    def create_company(self, company: CompanyRecord) -> CompanyRecord:
        payload = company.model_copy(update={"id": None}).to_payload()
        response = self._request("POST", "/companies", action="create", timeout=self.mutation_timeout, json=payload)
        self._check(response, "Failed to add company")
        try:
            created = CompanyRecord.model_validate(response.json())
        except ValueError as e:
            raise StoreStatusError(
                f"Failed to add company: {e}", status_code=response.status_code, reason=response.reason
            ) from e
        if created.id is None:
            raise StoreStatusError(
                "Failed to add company: store returned no id", status_code=response.status_code, reason=response.reason
            )
        return created

    def update_company(self, company_id: int, company: CompanyRecord) -> CompanyRecord:
        payload = company.model_copy(update={"id": company_id}).to_payload()
        response = self._request(
            "PUT", f"/companies/{company_id}", action="update", timeout=self.mutation_timeout, json=payload
        )
        self._check(response, "Failed to update company")
        try:
            body = response.json()
        except ValueError:
            body = None
        sent = company.model_copy(update={"id": company_id})
        if not isinstance(body, dict):
            return sent
        # The store may echo a different id type; ours stays canonical
        try:
            return CompanyRecord.model_validate({**body, "id": company_id})
        except ValueError as e:
            logging.warning(
                f"PUT /companies/{company_id} echoed an invalid record, keeping the sent one: {e}",
                extra={"action": "update", "status": "echo_invalid", "company_id": company_id, "error": str(e)},
            )
            return sent

    def delete_company(self, company_id: int) -> None:
        response = self._request(
            "DELETE", f"/companies/{company_id}", action="delete", timeout=self.mutation_timeout
        )
        self._check(response, "Failed to delete company")
