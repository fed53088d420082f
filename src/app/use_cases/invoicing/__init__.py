"""Invoicing use cases"""
from .batch_invoice_creator import BatchInvoiceCreator
from .preview_drafts import PreviewDrafts
from .generate_drafts import GenerateDrafts
from .link_sources import LinkSourcesToCustomer
from .dtos import (
    PreviewDraftsCommandDTO,
    DraftPreviewDTO,
    GenerateDraftsCommandDTO,
    LinkSourcesCommandDTO,
    LinkSourcesResponseDTO,
)

__all__ = [
    "BatchInvoiceCreator",
    "PreviewDrafts",
    "GenerateDrafts",
    "LinkSourcesToCustomer",
    "PreviewDraftsCommandDTO",
    "DraftPreviewDTO",
    "GenerateDraftsCommandDTO",
    "LinkSourcesCommandDTO",
    "LinkSourcesResponseDTO",
]
