from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from models.company_record import COMPANY_FIELDS, CompanyRecord
from services.errors import FormValidationError


# Required fields and the message shown next to each one; status always has a value
REQUIRED_FIELD_MESSAGES: Dict[str, str] = {
    "name": "Company name is required",
    "location": "Location is required",
    "industry": "Industry is required",
    "employees": "Employee count is required",
    "revenue": "Revenue is required",
    "website": "Website is required",
    "founded": "Founded year is required",
}


def empty_form() -> Dict[str, str]:
    return CompanyRecord().form_data()


def validate_company_form(data: Mapping[str, Any]) -> Dict[str, str]:
    """Return ``{field: message}`` for every required field that is blank."""
    errors: Dict[str, str] = {}
    for field, message in REQUIRED_FIELD_MESSAGES.items():
        value = data.get(field)
        if value is None or not str(value).strip():
            errors[field] = message
    return errors


def build_company(data: Mapping[str, Any], company_id: Optional[int] = None) -> CompanyRecord:
    """Validate form data and turn it into a record.

    Raises FormValidationError listing only the offending fields.
    """
    errors = validate_company_form(data)
    if errors:
        logging.info(
            f"Form rejected, missing: {', '.join(errors)}",
            extra={"action": "validate", "status": "invalid"},
        )
        raise FormValidationError(errors)
    values = {field: str(data.get(field) or "") for field in COMPANY_FIELDS}
    if not values["status"]:
        values["status"] = "Active"
    return CompanyRecord(id=company_id, **values)
