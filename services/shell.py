from __future__ import annotations

import shlex
from typing import Callable, Dict, List, Optional

from models.company_record import (
    COMPANY_FIELDS,
    EMPLOYEE_OPTIONS,
    INDUSTRY_OPTIONS,
    REVENUE_OPTIONS,
    STATUS_OPTIONS,
)
from models.view_state import (
    ApplyFilter,
    ClearFilter,
    CloseFilter,
    NextPage,
    OpenFilter,
    PreviousPage,
    ResetView,
    SetPage,
    SetPageSize,
    SetSearchTerm,
    ToggleAppliedValue,
    TogglePendingValue,
    ToggleSort,
)
from services.csv_export import write_companies_csv
from services.directory import CompanyDirectory, LoadStatus, ModalOpen
from services.errors import FlowError, FormValidationError
from services.reporting import render_filter_menu, render_load_error, render_page


HELP = """Commands:
  show                     redraw the table
  search [TERM]            set (or clear) the search term
  sort FIELD               cycle sort: none -> asc -> desc -> none
  filter FIELD             open/close the filter menu for FIELD
  toggle FIELD VALUE       toggle VALUE (pending if the menu is open, applied otherwise)
  apply FIELD | clear FIELD | close
  options FIELD            list filter values for FIELD
  next | prev | page N | size N
  reset                    clear search, filters and sort
  add | edit ID | delete ID
  export [PATH]            write the filtered and sorted rows as CSV
  retry | help | quit"""

_SUGGESTIONS: Dict[str, List[str]] = {
    "industry": INDUSTRY_OPTIONS,
    "employees": EMPLOYEE_OPTIONS,
    "revenue": REVENUE_OPTIONS,
    "status": STATUS_OPTIONS,
}


class DirectoryShell:
    """Line-oriented front end over a CompanyDirectory."""

    def __init__(
        self,
        directory: CompanyDirectory,
        input_func: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ):
        self.directory = directory
        self.input = input_func
        self.write = write
        self._running = False

    # --- Helpers ---

    def _ask(self, prompt: str) -> Optional[str]:
        try:
            return self.input(prompt)
        except EOFError:
            self._running = False
            return None

    def _yes(self, message: str) -> bool:
        answer = self._ask(f"{message} [y/N] ")
        return (answer or "").strip().lower() in ("y", "yes")

    def show(self) -> None:
        d = self.directory
        if d.status is LoadStatus.FAILED:
            self.write(render_load_error(d.error))
            return
        self.write(render_page(d.page(), d.view, d.columns))
        if d.view.open_filter:
            field_name = d.view.open_filter
            self.write(render_filter_menu(field_name, d.filter_options(field_name), d.view.pending(field_name)))

    def _prompt_fields(self, form: Dict[str, str], fields: List[str]) -> bool:
        for field_name in fields:
            hint = _SUGGESTIONS.get(field_name)
            if hint:
                self.write(f"  {field_name} options: {', '.join(hint)}")
            answer = self._ask(f"{field_name} [{form.get(field_name, '')}]: ")
            if answer is None:
                return False
            if answer.strip():
                form[field_name] = answer.strip()
        return True

    def _fill_and_submit(self, modal: ModalOpen) -> None:
        self.write(modal.title)
        form = modal.form_defaults()
        fields = list(COMPANY_FIELDS)
        while True:
            if not self._prompt_fields(form, fields):
                self.directory.cancel()
                self.write("Cancelled")
                return
            try:
                saved = self.directory.submit(form)
            except FormValidationError as e:
                for field_name, message in e.errors.items():
                    self.write(f"  {field_name}: {message}")
                fields = list(e.errors)
                continue
            if saved is not None:
                self.write(f"Saved company {saved.id}: {saved.name}")
            return

    def _company_id(self, args: List[str]) -> Optional[int]:
        if not args:
            self.write("An id is required")
            return None
        try:
            return int(args[0])
        except ValueError:
            self.write(f"Invalid id: {args[0]}")
            return None

    # --- Commands ---

    def handle(self, line: str) -> None:
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.write(f"Could not parse command: {e}")
            return
        if not parts:
            self.show()
            return
        cmd, args = parts[0].lower(), parts[1:]
        d = self.directory

        if cmd in ("quit", "exit"):
            self._running = False
            return
        if cmd == "help":
            self.write(HELP)
            return
        if cmd == "retry":
            d.retry()
            self.show()
            return
        if d.status is not LoadStatus.READY:
            self.write(render_load_error(d.error))
            return

        try:
            if cmd == "show":
                pass
            elif cmd == "search":
                d.dispatch(SetSearchTerm(" ".join(args)))
            elif cmd == "sort" and args:
                if args[0] not in d.sortable_fields():
                    self.write(f"Cannot sort by {args[0]}: use one of {', '.join(d.sortable_fields())}")
                    return
                d.dispatch(ToggleSort(args[0]))
            elif cmd == "filter" and args:
                d.dispatch(OpenFilter(args[0]))
            elif cmd == "toggle" and len(args) >= 2:
                field_name, value = args[0], " ".join(args[1:])
                if d.view.open_filter == field_name:
                    d.dispatch(TogglePendingValue(field_name, value))
                else:
                    d.dispatch(ToggleAppliedValue(field_name, value))
            elif cmd == "apply" and args:
                d.dispatch(ApplyFilter(args[0]))
            elif cmd == "clear" and args:
                d.dispatch(ClearFilter(args[0]))
            elif cmd == "close":
                d.dispatch(CloseFilter())
            elif cmd == "options" and args:
                self.write(render_filter_menu(args[0], d.filter_options(args[0]), d.view.applied(args[0])))
                return
            elif cmd == "next":
                d.dispatch(NextPage(d.page().total_pages))
            elif cmd == "prev":
                d.dispatch(PreviousPage())
            elif cmd == "page" and args:
                d.dispatch(SetPage(int(args[0]), d.page().total_pages))
            elif cmd == "size" and args:
                d.dispatch(SetPageSize(int(args[0])))
            elif cmd == "reset":
                d.dispatch(ResetView())
            elif cmd == "add":
                self._fill_and_submit(d.open_create())
            elif cmd == "edit":
                company_id = self._company_id(args)
                if company_id is None:
                    return
                pending = d.request_edit(company_id)
                if not self._yes(pending.message):
                    d.cancel()
                    return
                self._fill_and_submit(d.confirm())
            elif cmd == "delete":
                company_id = self._company_id(args)
                if company_id is None:
                    return
                pending = d.request_delete(company_id)
                if not self._yes(pending.message):
                    d.cancel()
                    return
                if d.confirm():
                    self.write(f"Deleted company {company_id}")
            elif cmd == "export":
                path = write_companies_csv(d.processed(), args[0] if args else None)
                self.write(f"Exported to {path}")
                return
            else:
                self.write(f"Unknown command: {line.strip()} (try 'help')")
                return
        except (FlowError, ValueError) as e:
            self.write(str(e))
            return
        self.show()

    def run(self) -> None:
        self._running = True
        self.show()
        while self._running:
            line = self._ask("> ")
            if line is None:
                break
            self.handle(line)
