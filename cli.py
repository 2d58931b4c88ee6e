import argparse
import logging
import os
import sys
import uuid as _uuid

from config.settings import get_settings
from models.company_record import COMPANY_FIELDS
from models.view_state import SetPage, SetPageSize, SetSearchTerm, SetSort, SortDirection, ToggleAppliedValue
from services.api_client import CompanyApiClient
from services.csv_export import write_companies_csv
from services.directory import CompanyDirectory
from services.errors import FlowError, FormValidationError
from services.reporting import render_filter_menu, render_load_error, render_page
from services.shell import DirectoryShell
from utils.logging_setup import init_logging


def _build_directory(args) -> CompanyDirectory:
	settings = get_settings()
	client = CompanyApiClient(settings, base_url=args.api_url, timeout=args.timeout)

	def _alert(message: str) -> None:
		print(f"Error: {message}", file=sys.stderr)

	return CompanyDirectory(client, settings=settings, alert=_alert)


def _load_or_exit(directory: CompanyDirectory) -> None:
	if not directory.load():
		print(render_load_error(directory.error), file=sys.stderr)
		sys.exit(1)


def _apply_view_args(directory: CompanyDirectory, args) -> None:
	"""Translate list/export flags into view actions, in pipeline order."""
	if getattr(args, "search", None):
		directory.dispatch(SetSearchTerm(args.search))
	for raw in getattr(args, "filter", None) or []:
		field_name, _, value = raw.partition("=")
		if not value or field_name not in directory.view.filterable_fields:
			allowed = ", ".join(directory.view.filterable_fields)
			print(f"Invalid filter '{raw}': use FIELD=VALUE with FIELD one of {allowed}", file=sys.stderr)
			sys.exit(2)
		if value not in directory.view.applied(field_name):
			directory.dispatch(ToggleAppliedValue(field_name, value))
	if getattr(args, "sort", None):
		if args.sort not in directory.sortable_fields():
			allowed = ", ".join(directory.sortable_fields())
			print(f"Invalid sort field '{args.sort}': use one of {allowed}", file=sys.stderr)
			sys.exit(2)
		direction = SortDirection.DESC if args.desc else SortDirection.ASC
		directory.dispatch(SetSort(args.sort, direction))
	if getattr(args, "page_size", None):
		directory.dispatch(SetPageSize(args.page_size))
	if getattr(args, "page", None):
		directory.dispatch(SetPage(args.page, directory.page().total_pages))


def _form_from_args(args, base: dict) -> dict:
	form = dict(base)
	for field_name in COMPANY_FIELDS:
		value = getattr(args, field_name, None)
		if value is not None:
			form[field_name] = value
	return form


def _confirm(message: str, assume_yes: bool) -> bool:
	if assume_yes:
		return True
	try:
		answer = input(f"{message} [y/N] ")
	except EOFError:
		return False
	return answer.strip().lower() in ("y", "yes")


def _submit_or_exit(directory: CompanyDirectory, form: dict):
	try:
		saved = directory.submit(form)
	except FormValidationError as e:
		for field_name, message in e.errors.items():
			print(f"{field_name}: {message}", file=sys.stderr)
		sys.exit(2)
	if saved is None:
		sys.exit(1)
	return saved


def cmd_list(args):
	directory = _build_directory(args)
	_load_or_exit(directory)
	_apply_view_args(directory, args)
	print(render_page(directory.page(), directory.view, directory.columns))


def cmd_options(args):
	directory = _build_directory(args)
	_load_or_exit(directory)
	print(render_filter_menu(args.field, directory.filter_options(args.field), ()))


def cmd_add(args):
	directory = _build_directory(args)
	_load_or_exit(directory)
	modal = directory.open_create()
	saved = _submit_or_exit(directory, _form_from_args(args, modal.form_defaults()))
	print(f"Added company {saved.id}: {saved.name}")


def cmd_edit(args):
	directory = _build_directory(args)
	_load_or_exit(directory)
	try:
		pending = directory.request_edit(args.id)
	except FlowError as e:
		print(str(e), file=sys.stderr)
		sys.exit(1)
	if not _confirm(pending.message, args.yes):
		directory.cancel()
		print("Cancelled")
		return
	modal = directory.confirm()
	saved = _submit_or_exit(directory, _form_from_args(args, modal.form_defaults()))
	print(f"Updated company {saved.id}: {saved.name}")


def cmd_delete(args):
	directory = _build_directory(args)
	_load_or_exit(directory)
	try:
		pending = directory.request_delete(args.id)
	except FlowError as e:
		print(str(e), file=sys.stderr)
		sys.exit(1)
	if not _confirm(pending.message, args.yes):
		directory.cancel()
		print("Cancelled")
		return
	if not directory.confirm():
		sys.exit(1)
	print(f"Deleted company {args.id}")


def cmd_export(args):
	directory = _build_directory(args)
	_load_or_exit(directory)
	_apply_view_args(directory, args)
	rows = directory.processed()
	path = write_companies_csv(rows, args.output)
	print(f"Exported {len(rows)} companies to {path}")


def cmd_browse(args):
	directory = _build_directory(args)
	directory.load()
	DirectoryShell(directory).run()


def _add_view_flags(p) -> None:
	p.add_argument("--search", "-q", type=str, help="Case-insensitive substring search over all fields")
	p.add_argument("--filter", "-f", action="append", metavar="FIELD=VALUE", help="Keep rows whose FIELD equals VALUE (repeatable; same field = any of)")
	p.add_argument("--sort", type=str, help="Sort by field (ascending unless --desc)")
	p.add_argument("--desc", action="store_true", help="Sort descending")


def _add_form_flags(p) -> None:
	for field_name in COMPANY_FIELDS:
		p.add_argument(f"--{field_name}", type=str, default=None, help=f"Company {field_name}")


def main():
	settings = get_settings()
	init_logging(settings.log_level)
	if not os.getenv("RUN_ID"):
		os.environ["RUN_ID"] = _uuid.uuid4().hex
	parser = argparse.ArgumentParser(description="Company directory CLI")
	parser.add_argument("--api-url", default=settings.api_url, help="Company store base URL (default from settings)")
	parser.add_argument("--timeout", type=float, default=settings.api_timeout_seconds, help="Initial load timeout in seconds")
	sub = parser.add_subparsers(dest="cmd", required=True)

	p_list = sub.add_parser("list", help="Show one page of companies")
	_add_view_flags(p_list)
	p_list.add_argument("--page", type=int, default=1)
	p_list.add_argument("--page-size", type=int, choices=list(settings.page_size_options), default=settings.page_size)
	p_list.set_defaults(func=cmd_list)

	p_opt = sub.add_parser("options", help="List filter values for a field")
	p_opt.add_argument("field")
	p_opt.set_defaults(func=cmd_options)

	p_add = sub.add_parser("add", help="Add a company")
	_add_form_flags(p_add)
	p_add.set_defaults(func=cmd_add)

	p_edit = sub.add_parser("edit", help="Edit a company by id")
	p_edit.add_argument("id", type=int)
	p_edit.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
	_add_form_flags(p_edit)
	p_edit.set_defaults(func=cmd_edit)

	p_del = sub.add_parser("delete", help="Delete a company by id")
	p_del.add_argument("id", type=int)
	p_del.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
	p_del.set_defaults(func=cmd_delete)

	p_exp = sub.add_parser("export", help="Export filtered and sorted companies as CSV")
	_add_view_flags(p_exp)
	p_exp.add_argument("--output", "-o", default=settings.export_path, help="CSV path (default from settings)")
	p_exp.set_defaults(func=cmd_export)

	p_browse = sub.add_parser("browse", help="Interactive table")
	p_browse.set_defaults(func=cmd_browse)

	args = parser.parse_args()
	logging.debug(f"Running {args.cmd}", extra={"action": args.cmd})
	args.func(args)


if __name__ == "__main__":
	main()
