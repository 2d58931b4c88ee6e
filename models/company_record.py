from __future__ import annotations

from pydantic import BaseModel, ConfigDict


INDUSTRY_OPTIONS = [
    "Technology",
    "Healthcare",
    "Finance",
    "Energy",
    "Retail",
    "Education",
    "Automotive",
    "Logistics",
    "Manufacturing",
    "Other",
]
EMPLOYEE_OPTIONS = ["1-10", "11-50", "51-100", "101-500", "501-1000", "1000+"]
REVENUE_OPTIONS = ["<$1M", "$1M - $10M", "$10M - $50M", "$50M - $100M", "$100M+"]
STATUS_OPTIONS = ["Active", "Inactive"]

# Editable fields in form and export order
COMPANY_FIELDS = [
    "name",
    "location",
    "industry",
    "employees",
    "revenue",
    "website",
    "founded",
    "status",
]


class CompanyRecord(BaseModel):
    """One directory entry as exchanged with the company store.

    ``id`` is assigned by the store on creation and never changes afterwards.
    The other fields are free-form strings; the option lists above are
    suggestions only.
    """

    id: int | None = None
    name: str = ""
    location: str = ""
    industry: str = ""
    employees: str = ""
    revenue: str = ""
    website: str = ""
    founded: str = ""
    status: str = "Active"

    model_config = ConfigDict(extra="ignore")

    def to_payload(self) -> dict:
        """JSON body for the store; omits ``id`` while it is unassigned."""
        return self.model_dump(exclude_none=True)

    def form_data(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in COMPANY_FIELDS}
