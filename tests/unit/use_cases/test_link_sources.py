"""Unit tests for LinkSourcesToCustomer use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.invoicing import LinkSourcesCommandDTO, LinkSourcesToCustomer
from src.domain.family import Family


@pytest.fixture
def mock_source_repo():
    repo = MagicMock()
    repo.link_event_orders = AsyncMock(return_value=0)
    repo.link_hub_bookings = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def mock_family_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=Family(id=10, display_name="Smith Family"))
    return repo


@pytest.fixture
def link_use_case(mock_uow, mock_source_repo, mock_family_repo):
    return LinkSourcesToCustomer(uow=mock_uow, source_repo=mock_source_repo, family_repo=mock_family_repo)


@pytest.mark.asyncio
class TestLinkSourcesToCustomer:
    async def test_links_orders_and_bookings(self, link_use_case, mock_source_repo, mock_uow):
        """
        Given: An existing family and two orders plus one booking
        When: They are linked
        Then: Both repositories are called and the transaction commits
        """
        # Arrange
        mock_source_repo.link_event_orders = AsyncMock(return_value=2)
        mock_source_repo.link_hub_bookings = AsyncMock(return_value=1)
        command = LinkSourcesCommandDTO(customer_id=10, event_order_ids=[1, 2], hub_booking_ids=[7])

        # Act
        result = await link_use_case.execute(command)

        # Assert
        assert result.is_ok()
        assert result.value.linked_event_orders == 2
        assert result.value.linked_hub_bookings == 1
        mock_source_repo.link_event_orders.assert_awaited_once_with([1, 2], 10)
        mock_source_repo.link_hub_bookings.assert_awaited_once_with([7], 10)
        mock_uow.commit.assert_awaited_once()

    async def test_no_ids(self, link_use_case, mock_family_repo):
        result = await link_use_case.execute(LinkSourcesCommandDTO(customer_id=10))

        assert result.error.code == "EMPTY_SELECTION"
        mock_family_repo.get_by_id.assert_not_awaited()

    async def test_unknown_family(self, link_use_case, mock_family_repo, mock_source_repo, mock_uow):
        mock_family_repo.get_by_id = AsyncMock(return_value=None)

        result = await link_use_case.execute(LinkSourcesCommandDTO(customer_id=99, event_order_ids=[1]))

        assert result.error.code == "CUSTOMER_NOT_FOUND"
        mock_source_repo.link_event_orders.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_repository_failure_rolls_back(self, link_use_case, mock_source_repo, mock_uow):
        mock_source_repo.link_hub_bookings = AsyncMock(side_effect=Exception("lock timeout"))

        result = await link_use_case.execute(LinkSourcesCommandDTO(customer_id=10, hub_booking_ids=[7]))

        assert result.error.code == "LINK_SOURCES_FAILED"
        assert result.error.reason == "lock timeout"
        mock_uow.rollback.assert_awaited_once()
