"""Invoice Drafts API Routes

FastAPI routes for previewing and generating draft invoices.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import ClientError
from src.api.schemas.draft_request import DraftRequestSchema, LinkSourcesRequestSchema
from src.app.drafting import BatchResult
from src.app.services.event_publisher import EventPublisher
from src.app.use_cases.invoicing import (
    DraftPreviewDTO,
    GenerateDrafts,
    GenerateDraftsCommandDTO,
    LinkSourcesCommandDTO,
    LinkSourcesResponseDTO,
    LinkSourcesToCustomer,
    PreviewDrafts,
    PreviewDraftsCommandDTO,
)
from src.adapter.repositories import (
    SqlAlchemyBillableSourceRepository,
    SqlAlchemyFamilyRepository,
    SqlAlchemyInvoiceRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_event_publisher, get_session

router = APIRouter(prefix="/billing/drafts", tags=["Invoice Drafts"])

VALIDATION_CODES = {"VALIDATION_ERROR", "INVALID_OVERRIDE", "EMPTY_SELECTION", "MISSING_PERIOD"}

ERROR_RESPONSES = {
    400: {
        "description": "Validation error",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "MISSING_PERIOD",
                        "message": "Recurring invoices need a billing period"
                    }
                }
            }
        }
    },
    500: {
        "description": "Billable sources could not be loaded",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "LOAD_SOURCES_FAILED",
                        "message": "Failed to load billable sources"
                    }
                }
            }
        }
    },
}


def _raise_for(error):
    if error.code in VALIDATION_CODES:
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    if error.code == "CUSTOMER_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    raise ClientError(error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _command_fields(request: DraftRequestSchema) -> dict:
    return dict(
        mode=request.mode,
        period=request.to_period(),
        cadence=request.cadence,
        service_code=request.service_code,
        overrides=request.overrides,
        amount_overrides=request.amount_overrides,
        global_quantities=request.global_quantities,
        selected_item_ids=request.selected_item_ids,
        sort_by=request.sort_by,
        descending=request.descending,
        match_policy=request.match_policy,
    )


@router.post(
    "/preview",
    response_model=DraftPreviewDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def preview_drafts(
    request: DraftRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Preview per-customer invoice drafts for a billing mode.

    Nothing is written. Customers already invoiced for the period are
    flagged and left out of the default selection; unlinked event orders and
    hub bookings are listed under their own group and never selected.

    **Returns:**
    - 200: Draft groups with the applied selection and totals
    - 400: Missing period or invalid override
    - 500: Sources could not be loaded
    """
    source_repo = SqlAlchemyBillableSourceRepository(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session, ApplicationConfig.INVOICE_NUMBER_PREFIX)

    command = PreviewDraftsCommandDTO(**_command_fields(request))

    use_case = PreviewDrafts(source_repo, invoice_repo)
    result = await use_case.execute(command)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.post(
    "/generate",
    response_model=BatchResult,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def generate_drafts(
    request: DraftRequestSchema,
    session: AsyncSession = Depends(get_session),
    event_publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Create draft invoices for the selected items.

    Sources are re-read and re-priced before submission. Recurring runs are
    all-or-nothing; event and hub runs create one invoice per customer and
    report per-customer failures in the result.

    **Returns:**
    - 200: Batch result (status success, partial, failed or empty)
    - 400: Empty selection, missing period or invalid override
    - 500: Sources could not be loaded
    """
    uow = SqlAlchemyUnitOfWork(session)
    source_repo = SqlAlchemyBillableSourceRepository(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session, ApplicationConfig.INVOICE_NUMBER_PREFIX)

    command = GenerateDraftsCommandDTO(
        **_command_fields(request),
        due_date=request.due_date,
    )

    use_case = GenerateDrafts(uow, source_repo, invoice_repo, event_publisher)
    result = await use_case.execute(command)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.post(
    "/link",
    response_model=LinkSourcesResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Family not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CUSTOMER_NOT_FOUND",
                            "message": "Family 42 not found"
                        }
                    }
                }
            }
        }
    },
)
async def link_sources(
    request: LinkSourcesRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Link unlinked event orders and hub bookings to a family.

    **Returns:**
    - 200: Number of orders and bookings linked
    - 400: No ids given
    - 404: Family not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    source_repo = SqlAlchemyBillableSourceRepository(session)
    family_repo = SqlAlchemyFamilyRepository(session)

    command = LinkSourcesCommandDTO(
        customer_id=request.customer_id,
        event_order_ids=request.event_order_ids,
        hub_booking_ids=request.hub_booking_ids,
    )

    use_case = LinkSourcesToCustomer(uow, source_repo, family_repo)
    result = await use_case.execute(command)

    if result.is_err():
        _raise_for(result.error)

    return result.value
