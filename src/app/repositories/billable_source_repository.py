"""Billable Source Repository Interface

Defines the contract for reading billable candidates from the record store
and for linking unlinked event orders / hub bookings to a family.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from src.app.drafting import (
    EventOrderSource,
    HubSessionSource,
    PendingRegistrationFee,
    RecurringEnrollment,
)


class BillableSourceRepository(ABC):
    """
    Repository interface for billable sources

    Every list operation returns fresh snapshots; nothing is cached across runs.
    """

    @abstractmethod
    async def list_billable_enrollments(
        self, cadence: Optional[str] = None, service_code: Optional[str] = None
    ) -> List[RecurringEnrollment]:
        """
        List active enrollments of active families

        Args:
            cadence: "weekly" keeps weekly-billed services, "monthly" keeps the rest,
                     None keeps everything
            service_code: Optional service code filter

        Returns:
            Enrollment snapshots joined with service, family and student
        """
        pass

    @abstractmethod
    async def list_event_orders_pending(self) -> List[EventOrderSource]:
        """
        List event orders with payment pending and no invoice yet

        Returns:
            Event order snapshots (customer_id is None for unlinked purchasers)
        """
        pass

    @abstractmethod
    async def list_class_registration_fees(
        self, family_ids: Sequence[int]
    ) -> List[PendingRegistrationFee]:
        """
        List class orders of the given families still awaiting an invoice

        Only orders for class events in stepup_pending count; they are
        billed as registration fees on the monthly invoice.

        Args:
            family_ids: Families on the current recurring run

        Returns:
            Pending registration fees, oldest order first
        """
        pass

    @abstractmethod
    async def list_hub_sessions_pending(self) -> List[HubSessionSource]:
        """
        List scheduled hub bookings with no invoice yet

        Returns:
            Hub session snapshots (customer_id is None for unlinked bookings)
        """
        pass

    @abstractmethod
    async def link_event_orders(self, order_ids: Sequence[int], family_id: int) -> int:
        """
        Attach event orders to a family

        Args:
            order_ids: Event order IDs
            family_id: Family to link to

        Returns:
            Number of orders updated
        """
        pass

    @abstractmethod
    async def link_hub_bookings(self, booking_ids: Sequence[int], family_id: int) -> int:
        """
        Attach hub bookings to a family

        Args:
            booking_ids: Hub booking IDs
            family_id: Family to link to

        Returns:
            Number of bookings updated
        """
        pass
