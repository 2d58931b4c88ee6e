from .store import CompanyStorePort

__all__ = [
    "CompanyStorePort",
]
