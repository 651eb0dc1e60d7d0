import pytest
from httpx import AsyncClient

from tests.utils import (
    PROXY_SECRET,
    WEBHOOK_SECRET,
    OrderFactory,
    post_order_webhook,
    proxy_url,
)


async def _requested_withdrawal(
    client: AsyncClient, trainer_id: str, banking_payload: dict, price: str = "90.00"
) -> dict:
    order = OrderFactory.create_order(
        line_items=[OrderFactory.create_line_item(trainer_id, price=price)]
    )
    await post_order_webhook(client, order, WEBHOOK_SECRET)
    await client.post(
        proxy_url("/trainer/banking", PROXY_SECRET, logged_in_customer_id=trainer_id),
        json=banking_payload,
    )
    response = await client.post(
        proxy_url("/payouts/request", PROXY_SECRET, logged_in_customer_id=trainer_id)
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
class TestSettlementAPI:
    async def test_settle_requested_withdrawal(
        self,
        client: AsyncClient,
        sample_trainer_id: str,
        banking_payload: dict,
        admin_headers: dict,
    ) -> None:
        withdrawal = await _requested_withdrawal(
            client, sample_trainer_id, banking_payload
        )

        response = await client.post(
            f"/v1/payouts/{withdrawal['id']}/settle", headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == withdrawal["id"]
        assert data["type"] == "paid"
        assert data["status"] == "paid"
        assert data["amount_cents"] == 9000
        assert data["meta"]["settled_by"] == admin_headers["X-MF-Admin-Email"]

    async def test_settle_twice_conflicts(
        self,
        client: AsyncClient,
        sample_trainer_id: str,
        banking_payload: dict,
        admin_headers: dict,
    ) -> None:
        withdrawal = await _requested_withdrawal(
            client, sample_trainer_id, banking_payload
        )
        await client.post(f"/v1/payouts/{withdrawal['id']}/settle", headers=admin_headers)

        response = await client.post(
            f"/v1/payouts/{withdrawal['id']}/settle", headers=admin_headers
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "PAYOUT_NOT_REQUESTED"

    async def test_settle_unknown_entry(
        self, client: AsyncClient, admin_headers: dict
    ) -> None:
        response = await client.post("/v1/payouts/424242/settle", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PAYOUT_HISTORY_NOT_FOUND"

    async def test_settle_requires_admin(self, client: AsyncClient) -> None:
        response = await client.post(
            "/v1/payouts/1/settle", headers={"X-MF-Admin-Email": "someone@else.test"}
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "ADMIN_FORBIDDEN"


@pytest.mark.integration
class TestAuditAPI:
    async def test_audit_is_consistent(
        self,
        client: AsyncClient,
        sample_trainer_id: str,
        banking_payload: dict,
        admin_headers: dict,
    ) -> None:
        await _requested_withdrawal(client, sample_trainer_id, banking_payload)

        response = await client.get(
            f"/v1/payouts/trainers/{sample_trainer_id}/audit", headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["consistent"] is True
        assert data["available_cents"] == 0
        assert data["pending_cents"] == 9000
        assert data["replayed_pending_cents"] == 9000

    async def test_audit_unknown_trainer(
        self, client: AsyncClient, admin_headers: dict
    ) -> None:
        response = await client.get(
            "/v1/payouts/trainers/nobody/audit", headers=admin_headers
        )

        assert response.status_code == 404

    async def test_audit_requires_admin(self, client: AsyncClient) -> None:
        response = await client.get("/v1/payouts/trainers/7001/audit")

        assert response.status_code == 403
