"""LinkSourcesToCustomer Use Case

Attaches unlinked event orders and hub bookings to an existing family so
they become eligible for invoicing.
"""

from libs.result import Result, Return, Error
from src.app.repositories.billable_source_repository import BillableSourceRepository
from src.app.repositories.family_repository import FamilyRepository
from src.app.services.unit_of_work import UnitOfWork
from .dtos import LinkSourcesCommandDTO, LinkSourcesResponseDTO


class LinkSourcesToCustomer:
    """
    Use Case: Link event orders / hub bookings to a family

    Business Rules:
    1. The family must exist
    2. At least one order or booking must be given
    3. Already-invoiced orders and bookings are left untouched

    Flow:
    1. Load family
    2. Link event orders and hub bookings
    3. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        source_repo: BillableSourceRepository,
        family_repo: FamilyRepository,
    ):
        self.uow = uow
        self.source_repo = source_repo
        self.family_repo = family_repo

    async def execute(self, command: LinkSourcesCommandDTO) -> Result[LinkSourcesResponseDTO]:
        if not command.event_order_ids and not command.hub_booking_ids:
            return Return.err(
                Error(
                    code="EMPTY_SELECTION",
                    message="Select at least one event order or hub booking to link",
                    reason="No ids given",
                )
            )

        try:
            family = await self.family_repo.get_by_id(command.customer_id)
            if family is None:
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"Family {command.customer_id} not found",
                        reason="Unknown family id",
                    )
                )

            linked_orders = await self.source_repo.link_event_orders(
                command.event_order_ids, command.customer_id
            )
            linked_bookings = await self.source_repo.link_hub_bookings(
                command.hub_booking_ids, command.customer_id
            )

            await self.uow.commit()

            return Return.ok(
                LinkSourcesResponseDTO(
                    customer_id=command.customer_id,
                    linked_event_orders=linked_orders,
                    linked_hub_bookings=linked_bookings,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="LINK_SOURCES_FAILED",
                    message="Failed to link sources to family",
                    reason=str(e),
                )
            )
