from .billable_source_repository import SqlAlchemyBillableSourceRepository
from .family_repository import SqlAlchemyFamilyRepository
from .invoice_repository import SqlAlchemyInvoiceRepository

__all__ = [
    "SqlAlchemyBillableSourceRepository",
    "SqlAlchemyFamilyRepository",
    "SqlAlchemyInvoiceRepository",
]
