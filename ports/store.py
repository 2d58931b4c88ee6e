from __future__ import annotations

from typing import List, Protocol

from models.company_record import CompanyRecord


class CompanyStorePort(Protocol):
    def list_companies(self) -> List[CompanyRecord]:
        ...

    def create_company(self, company: CompanyRecord) -> CompanyRecord:
        ...

    def update_company(self, company_id: int, company: CompanyRecord) -> CompanyRecord:
        ...

    def delete_company(self, company_id: int) -> None:
        ...
