from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Union

from config.settings import Settings, get_settings
from models.columns import COMPANY_COLUMNS, ColumnSpec
from models.company_record import CompanyRecord
from models.view_state import Action, DataChanged, SetPage, ViewState
from pipelines.table import PageView, build_page, filter_options, process_rows
from ports.store import CompanyStorePort
from services.errors import FlowError, StoreError, StoreStatusError
from services.validation import build_company, empty_form
from services.view_reducer import initial_state, reduce
from utils.audit_log import log_mutation


class LoadStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class ConfirmPending:
    kind: Literal["delete", "edit"]
    company: CompanyRecord

    @property
    def message(self) -> str:
        return f'Are you sure you want to {self.kind} "{self.company.name}"?'


@dataclass(frozen=True)
class ModalOpen:
    mode: Literal["create", "edit"]
    company: Optional[CompanyRecord] = None

    @property
    def title(self) -> str:
        return "Edit Company" if self.mode == "edit" else "Add New Company"

    def form_defaults(self) -> Dict[str, str]:
        return self.company.form_data() if self.company else empty_form()


FlowState = Union[Idle, ConfirmPending, ModalOpen]


def _log_alert(message: str) -> None:
    logging.error(message, extra={"status": "alert"})


class CompanyDirectory:
    """Local view of the company store plus the add/edit/delete flows.

    The cached company list only changes after the store confirmed a
    mutation, so it always matches the last known-good server state.
    ``alert`` receives the user-facing message of every failed mutation.
    """

    def __init__(
        self,
        store: CompanyStorePort,
        settings: Optional[Settings] = None,
        columns: Optional[List[ColumnSpec]] = None,
        alert: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.columns = columns if columns is not None else COMPANY_COLUMNS
        self.alert = alert or _log_alert
        self.companies: List[CompanyRecord] = []
        self.status = LoadStatus.LOADING
        self.error: Optional[str] = None
        self.flow: FlowState = Idle()
        self.view: ViewState = initial_state(
            self.settings.filterable_fields,
            page_size=self.settings.page_size,
            page_size_options=self.settings.page_size_options,
        )

    # --- Loading ---

    def load(self) -> bool:
        self.status = LoadStatus.LOADING
        self.error = None
        try:
            companies = self.store.list_companies()
        except StoreError as e:
            self.status = LoadStatus.FAILED
            self.error = str(e)
            logging.error(f"Error fetching companies: {e}", extra={"action": "load", "status": "failed", "error": str(e)})
            return False
        self.status = LoadStatus.READY
        self._set_companies(list(companies))
        logging.info(f"Loaded {len(companies)} companies", extra={"action": "load", "status": "ok"})
        return True

    def retry(self) -> bool:
        """Full reload after a failed initial load."""
        self.flow = Idle()
        return self.load()

    def _set_companies(self, companies: List[CompanyRecord]) -> None:
        self.companies = companies
        self.view = reduce(self.view, DataChanged())

    # --- View ---

    def dispatch(self, action: Action) -> ViewState:
        self.view = reduce(self.view, action)
        # Keep the stored page inside the current page range
        pages = self.page().total_pages
        if self.view.page > pages:
            self.view = reduce(self.view, SetPage(self.view.page, pages))
        return self.view

    def sortable_fields(self) -> List[str]:
        return [c.key for c in self.columns if c.sortable]

    def page(self) -> PageView:
        return build_page(self.companies, self.view, self.columns)

    def processed(self) -> List[CompanyRecord]:
        return process_rows(self.companies, self.view, self.columns)

    def filter_options(self, field_name: str) -> List[str]:
        return filter_options(self.companies, field_name)

    # --- Flows ---

    def _require_ready(self) -> None:
        if self.status is not LoadStatus.READY:
            raise FlowError(f"Companies are not loaded (status={self.status.value})")

    def find(self, company_id: int) -> CompanyRecord:
        for company in self.companies:
            if company.id == company_id:
                return company
        raise FlowError(f"Unknown company id: {company_id}")

    def request_delete(self, company_id: int) -> ConfirmPending:
        self._require_ready()
        self.flow = ConfirmPending("delete", self.find(company_id))
        return self.flow

    def request_edit(self, company_id: int) -> ConfirmPending:
        self._require_ready()
        self.flow = ConfirmPending("edit", self.find(company_id))
        return self.flow

    def open_create(self) -> ModalOpen:
        self._require_ready()
        self.flow = ModalOpen("create")
        return self.flow

    def cancel(self) -> None:
        self.flow = Idle()

    def confirm(self) -> Union[ModalOpen, bool]:
        """Confirm the pending action.

        A delete runs immediately and returns whether it succeeded; an edit
        opens the pre-populated form and returns it.
        """
        flow = self.flow
        if not isinstance(flow, ConfirmPending):
            raise FlowError("Nothing to confirm")
        self.flow = Idle()
        if flow.kind == "edit":
            self.flow = ModalOpen("edit", flow.company)
            return self.flow
        return self._delete(flow.company)

    def submit(self, form: Mapping[str, Any]) -> Optional[CompanyRecord]:
        """Save the open form; returns the stored record or None on failure.

        Raises FormValidationError (form stays open) before any store call.
        """
        flow = self.flow
        if not isinstance(flow, ModalOpen):
            raise FlowError("No company form is open")
        editing = flow.company if flow.mode == "edit" else None
        company = build_company(form, company_id=editing.id if editing else None)
        self.flow = Idle()
        if editing is not None:
            return self._update(editing.id, company)
        return self._create(company)

    # --- Store calls ---

    def _mutate(self, action: str, company_id: Optional[int], call: Callable[[], Any], failure: str) -> tuple:
        t0 = time.time()
        try:
            result = call()
        except StoreError as e:
            duration_ms = int((time.time() - t0) * 1000)
            logging.error(
                f"{failure}: {e}",
                extra={"action": action, "status": "failed", "company_id": company_id, "error": str(e)},
            )
            log_mutation(action=action, company_id=company_id, status="failed", duration_ms=duration_ms, error=str(e))
            self.alert(str(e) if isinstance(e, StoreStatusError) else f"{failure}: {e}")
            return False, None
        duration_ms = int((time.time() - t0) * 1000)
        logging.info(
            f"{action} ok",
            extra={"action": action, "status": "ok", "company_id": company_id, "duration_ms": duration_ms},
        )
        log_mutation(action=action, company_id=company_id, duration_ms=duration_ms)
        return True, result

    def _delete(self, company: CompanyRecord) -> bool:
        ok, _ = self._mutate(
            "delete", company.id, lambda: self.store.delete_company(company.id), "Error deleting company"
        )
        if ok:
            self._set_companies([c for c in self.companies if c.id != company.id])
        return ok

    def _update(self, company_id: int, company: CompanyRecord) -> Optional[CompanyRecord]:
        ok, updated = self._mutate(
            "update", company_id, lambda: self.store.update_company(company_id, company), "Error saving company"
        )
        if not ok:
            return None
        updated = updated.model_copy(update={"id": company_id})
        self._set_companies([updated if c.id == company_id else c for c in self.companies])
        return updated

    def _create(self, company: CompanyRecord) -> Optional[CompanyRecord]:
        ok, created = self._mutate("create", None, lambda: self.store.create_company(company), "Error saving company")
        if not ok:
            return None
        self._set_companies(self.companies + [created])
        return created
