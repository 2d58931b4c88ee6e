from __future__ import annotations

import io
import logging

import utils.logging_setup as logging_setup
from utils.logging_setup import SafeExtraFormatter, init_logging


def _record(**extra):
    record = logging.LogRecord("directory", logging.INFO, __file__, 1, "delete ok", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_leaves_out_missing_extras(monkeypatch):
    monkeypatch.delenv("RUN_ID", raising=False)
    fmt = SafeExtraFormatter(fmt="%(message)s")
    assert fmt.format(_record()) == "delete ok"
    assert fmt.format(_record(company_id=None, status="ok")) == "delete ok status=ok"


def test_formatter_keeps_supplied_extras_in_fixed_order(monkeypatch):
    monkeypatch.delenv("RUN_ID", raising=False)
    fmt = SafeExtraFormatter(fmt="%(levelname)s %(message)s")
    line = fmt.format(_record(duration_ms=12, company_id=3, action="delete", status="ok"))
    assert line == "INFO delete ok action=delete status=ok duration_ms=12 company_id=3"


def test_formatter_takes_run_id_from_environment(monkeypatch):
    monkeypatch.setenv("RUN_ID", "abc123")
    fmt = SafeExtraFormatter(fmt="%(message)s")
    assert fmt.format(_record(action="load")) == "delete ok action=load run_id=abc123"
    assert fmt.format(_record(run_id="explicit")) == "delete ok run_id=explicit"


def test_init_logging_writes_to_given_stream(monkeypatch):
    monkeypatch.delenv("RUN_ID", raising=False)
    root = logging.getLogger()
    monkeypatch.setattr(logging_setup, "_INITIALIZED", False)
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(logging.getLogger("urllib3"), "level", logging.getLogger("urllib3").level)
    level = logging.getLevelName(root.level)

    buf = io.StringIO()
    init_logging(level, stream=buf)
    logging.warning("store unreachable", extra={"action": "load", "status": "failed"})

    assert len(root.handlers) == 1
    assert buf.getvalue().rstrip().endswith("store unreachable action=load status=failed")
