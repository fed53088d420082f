"""Integration tests for Invoice Drafts API endpoints"""

import pytest
from datetime import date
from decimal import Decimal
from httpx import AsyncClient
from sqlmodel import select

from config import ApplicationConfig
from src.domain import EventOrder, Invoice

BASE = f"{ApplicationConfig.API_PREFIX}/billing/drafts"

WEEKLY_RUN = {
    "mode": "recurring",
    "cadence": "weekly",
    "period_start": "2025-01-06",
    "period_end": "2025-01-10",
}


class TestPreviewAPI:
    """POST /billing/drafts/preview"""

    @pytest.mark.asyncio
    async def test_weekly_preview(self, client: AsyncClient, seed):
        """Weekly preview lists both active families and selects everything"""
        # Act
        response = await client.post(f"{BASE}/preview", json=WEEKLY_RUN)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["period"]["due_date"] == "2025-01-13"
        assert [g["customer_name"] for g in data["groups"]] == ["Jones Family", "Smith Family"]
        assert data["selected_count"] == 2
        assert Decimal(data["selected_total"]) == Decimal("300.00")
        item = data["groups"][0]["items"][0]
        assert item["description"] == "Leo Jones - Eaton Online: $150.00/week"
        assert "source" not in item

    @pytest.mark.asyncio
    async def test_global_quantity_and_amount_edit(self, client: AsyncClient, seed):
        jones_item = f"enrollment:{seed['enrollments'][2].id}"
        payload = {
            **WEEKLY_RUN,
            "global_quantities": {"eaton_online": "3"},
            "amount_overrides": {jones_item: "$300"},
        }

        response = await client.post(f"{BASE}/preview", json=payload)

        groups = {g["customer_name"]: g for g in response.json()["groups"]}
        jones = groups["Jones Family"]["items"][0]
        smith = groups["Smith Family"]["items"][0]
        assert Decimal(jones["unit_price"]) == Decimal("100.00")
        assert jones["is_overridden"] is True
        assert Decimal(smith["final_amount"]) == Decimal("450.00")
        assert smith["description"] == "Ava Smith - Eaton Online: 3 weeks × $150.00"

    @pytest.mark.asyncio
    async def test_existing_invoice_is_flagged(self, client: AsyncClient, db_session, seed):
        db_session.add(Invoice(
            family_id=seed["jones"].id, invoice_number="INV-2025-000001", invoice_date=date(2025, 1, 6),
            period_start=date(2025, 1, 6), period_end=date(2025, 1, 10),
            subtotal=Decimal("150.00"), total_amount=Decimal("150.00"),
        ))
        await db_session.commit()

        response = await client.post(f"{BASE}/preview", json=WEEKLY_RUN)

        data = response.json()
        assert data["duplicate_customer_ids"] == [seed["jones"].id]
        assert data["groups"][-1]["customer_name"] == "Jones Family"
        assert data["groups"][-1]["has_existing_invoice_for_period"] is True
        assert data["selected_count"] == 1

    @pytest.mark.asyncio
    async def test_event_preview_groups_unlinked_orders(self, client: AsyncClient, seed):
        response = await client.post(f"{BASE}/preview", json={"mode": "event"})

        data = response.json()
        assert data["period"] is None
        assert data["unlinked_count"] == 1
        assert [g["customer_name"] for g in data["groups"]] == ["Smith Family", "Unlinked"]

    @pytest.mark.asyncio
    async def test_recurring_without_period(self, client: AsyncClient, seed):
        response = await client.post(f"{BASE}/preview", json={"mode": "recurring"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_PERIOD"

    @pytest.mark.asyncio
    async def test_invalid_amount(self, client: AsyncClient, seed):
        payload = {**WEEKLY_RUN, "amount_overrides": {f"enrollment:{seed['enrollments'][0].id}": "abc"}}

        response = await client.post(f"{BASE}/preview", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_OVERRIDE"

    @pytest.mark.asyncio
    async def test_reversed_period_is_rejected(self, client: AsyncClient):
        payload = {"mode": "recurring", "period_start": "2025-01-10", "period_end": "2025-01-06"}

        response = await client.post(f"{BASE}/preview", json=payload)

        assert response.status_code == 422  # Pydantic validation error


class TestGenerateAPI:
    """POST /billing/drafts/generate"""

    @pytest.mark.asyncio
    async def test_weekly_run_then_rerun(self, client: AsyncClient, db_session, seed):
        """
        Given: Two active weekly families
        When: The weekly run is generated twice
        Then: The first run creates two drafts; the second finds both already invoiced
        """
        # Act
        first = await client.post(f"{BASE}/generate", json=WEEKLY_RUN)
        second = await client.post(f"{BASE}/generate", json=WEEKLY_RUN)

        # Assert
        assert first.status_code == 200
        data = first.json()
        assert data["status"] == "success"
        assert data["message"] == "Created 2 invoices"
        assert sorted(data["succeeded"]) == sorted([seed["jones"].id, seed["smith"].id])

        assert second.status_code == 400
        assert second.json()["error"]["code"] == "EMPTY_SELECTION"

        result = await db_session.execute(select(Invoice))
        assert len(result.scalars().all()) == 2

    @pytest.mark.asyncio
    async def test_event_run_reports_unlinked(self, client: AsyncClient, db_session, seed):
        unlinked = f"event_order:{seed['orders'][1].id}"
        linked = f"event_order:{seed['orders'][0].id}"
        payload = {"mode": "event", "selected_item_ids": [linked, unlinked], "due_date": "2025-02-17"}

        response = await client.post(f"{BASE}/generate", json=payload)

        data = response.json()
        assert data["succeeded"] == [seed["smith"].id]
        assert data["unlinked"] == [unlinked]
        assert data["invoices"][0]["line_count"] == 1
        assert Decimal(data["invoices"][0]["total_amount"]) == Decimal("50.00")

        pending = await client.post(f"{BASE}/preview", json={"mode": "event"})
        assert [g["customer_name"] for g in pending.json()["groups"]] == ["Unlinked"]

    @pytest.mark.asyncio
    async def test_monthly_run_adds_class_registration_fee(
        self, client: AsyncClient, db_session, seed, class_registration
    ):
        """
        Given: Ava's Robotics elective and a matching class order awaiting the monthly invoice
        When: The February monthly run is generated
        Then: Smith's invoice carries the fee line and the order is billed on it
        """
        # Arrange
        payload = {"mode": "recurring", "cadence": "monthly", "period_start": "2025-02-01", "period_end": "2025-02-28"}

        # Act
        response = await client.post(f"{BASE}/generate", json=payload)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["succeeded"] == [seed["smith"].id]
        invoice = data["invoices"][0]
        assert invoice["line_count"] == 3
        assert Decimal(invoice["total_amount"]) == Decimal("455.00")

        matched, pottery, *_ = class_registration["orders"]
        result = await db_session.execute(
            select(EventOrder.id, EventOrder.invoice_id).where(EventOrder.id.in_([matched.id, pottery.id]))
        )
        assert dict(result.all()) == {matched.id: invoice["invoice_id"], pottery.id: None}

        stored = await db_session.execute(select(Invoice.notes).where(Invoice.id == invoice["invoice_id"]))
        assert stored.scalar_one() == "For February 2025"

    @pytest.mark.asyncio
    async def test_nothing_selected(self, client: AsyncClient, seed):
        response = await client.post(f"{BASE}/generate", json={"mode": "hub", "selected_item_ids": []})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMPTY_SELECTION"


class TestLinkAPI:
    """POST /billing/drafts/link"""

    @pytest.mark.asyncio
    async def test_link_unlinked_order(self, client: AsyncClient, db_session, seed):
        order_id = seed["orders"][1].id

        response = await client.post(
            f"{BASE}/link", json={"customer_id": seed["jones"].id, "event_order_ids": [order_id]}
        )

        assert response.status_code == 200
        assert response.json() == {
            "customer_id": seed["jones"].id,
            "linked_event_orders": 1,
            "linked_hub_bookings": 0,
        }
        result = await db_session.execute(select(EventOrder.family_id).where(EventOrder.id == order_id))
        assert result.scalar_one() == seed["jones"].id

    @pytest.mark.asyncio
    async def test_unknown_family(self, client: AsyncClient, seed):
        response = await client.post(f"{BASE}/link", json={"customer_id": 9999, "hub_booking_ids": [1]})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CUSTOMER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_no_ids(self, client: AsyncClient, seed):
        response = await client.post(f"{BASE}/link", json={"customer_id": seed["jones"].id})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMPTY_SELECTION"
