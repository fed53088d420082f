from .billable_source_repository import BillableSourceRepository
from .family_repository import FamilyRepository
from .invoice_repository import InvoiceRepository

__all__ = [
    "BillableSourceRepository",
    "FamilyRepository",
    "InvoiceRepository",
]
