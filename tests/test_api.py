"""
SubsAPI: HTTP API Tests
=========================

What:  End-to-end tests through the FastAPI app (middleware, handlers,
       routes, service, SQLite database).
How:   HTTPX AsyncClient over ASGITransport; see the test_client fixture.

What we test:
    ✅ CRUD status codes and response bodies
    ✅ Business-rule failures → 400, unknown ids → 404, bad shapes → 422
    ✅ Summary endpoint totals and window validation
    ✅ X-Request-ID and X-Total-Count headers
    ✅ Health check
"""

import uuid

import pytest

BASE = "/api/v1/subscriptions"


async def create(client, user_id, **overrides):
    body = {
        "service_name": "Yandex Plus",
        "price": 400,
        "user_id": str(user_id),
        "start_date": "07-2025",
    }
    body.update(overrides)
    response = await client.post(BASE, json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestSubscriptionCrud:

    @pytest.mark.asyncio
    async def test_create(self, test_client, user_id):
        response = await test_client.post(
            BASE,
            json={
                "service_name": "Yandex Plus",
                "price": 400,
                "user_id": str(user_id),
                "start_date": "07-2025",
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["id"] >= 1
        assert body["user_id"] == str(user_id)
        assert body["start_date"] == "07-2025"
        assert body["end_date"] is None

    @pytest.mark.asyncio
    async def test_get(self, test_client, user_id):
        created = await create(test_client, user_id, end_date="09-2025")
        response = await test_client.get(f"{BASE}/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_update(self, test_client, user_id):
        created = await create(test_client, user_id, end_date="09-2025")
        response = await test_client.put(
            f"{BASE}/{created['id']}", json={"price": 450, "end_date": ""}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 450
        assert body["end_date"] is None
        assert body["service_name"] == "Yandex Plus"

        # Committed, not just flushed
        again = await test_client.get(f"{BASE}/{created['id']}")
        assert again.json()["price"] == 450

    @pytest.mark.asyncio
    async def test_delete(self, test_client, user_id):
        created = await create(test_client, user_id)
        response = await test_client.delete(f"{BASE}/{created['id']}")
        assert response.status_code == 204
        assert response.content == b""

        missing = await test_client.get(f"{BASE}/{created['id']}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_list_with_filters_and_total_header(self, test_client, user_id):
        await create(test_client, user_id, service_name="Netflix")
        await create(test_client, user_id, service_name="Spotify")
        await create(test_client, user_id, service_name="Netflix", start_date="01-2024")
        await create(test_client, uuid.uuid4(), service_name="Netflix")

        response = await test_client.get(
            BASE,
            params={"user_id": str(user_id), "service_name": "Netflix", "sort": "start_date_asc", "limit": 1},
        )
        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "2"
        body = response.json()
        assert body["total_count"] == 2
        assert body["has_more"] is True
        assert [s["start_date"] for s in body["subscriptions"]] == ["01-2024"]


class TestErrorResponses:

    @pytest.mark.asyncio
    async def test_malformed_date_is_400(self, test_client, user_id):
        response = await test_client.post(
            BASE,
            json={
                "service_name": "Yandex Plus",
                "price": 400,
                "user_id": str(user_id),
                "start_date": "2025-07",
            },
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "start_date"
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_end_before_start_is_400(self, test_client, user_id):
        response = await test_client.post(
            BASE,
            json={
                "service_name": "Yandex Plus",
                "price": 400,
                "user_id": str(user_id),
                "start_date": "07-2025",
                "end_date": "06-2025",
            },
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "end_date"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "override",
        [{"price": 0}, {"price": -5}, {"user_id": "not-a-uuid"}, {"service_name": ""}],
    )
    async def test_bad_shape_is_422(self, test_client, user_id, override):
        body = {
            "service_name": "Yandex Plus",
            "price": 400,
            "user_id": str(user_id),
            "start_date": "07-2025",
        }
        body.update(override)
        response = await test_client.post(BASE, json=body)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.get(f"{BASE}/424242")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert "424242" in body["message"]

    @pytest.mark.asyncio
    async def test_non_positive_id_is_422(self, test_client):
        response = await test_client.get(f"{BASE}/0")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_sort_is_400(self, test_client):
        response = await test_client.get(BASE, params={"sort": "price"})
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "sort"


class TestSummaryEndpoint:

    @pytest.mark.asyncio
    async def test_single_subscription(self, test_client, user_id):
        await create(test_client, user_id, start_date="01-2024", end_date="03-2024")

        response = await test_client.get(
            f"{BASE}/summary",
            params={
                "user_id": str(user_id),
                "service_name": "Yandex Plus",
                "from": "01-2024",
                "to": "12-2024",
            },
        )
        assert response.status_code == 200
        assert response.json() == {"unit_price": 400, "total_amount": 1200, "total_months": 3}

    @pytest.mark.asyncio
    async def test_overlap_counted_once(self, test_client, user_id):
        await create(test_client, user_id, price=200, start_date="06-2024")
        await create(test_client, user_id, price=100, start_date="01-2024")

        response = await test_client.get(
            f"{BASE}/summary",
            params={
                "user_id": str(user_id),
                "service_name": "Yandex Plus",
                "from": "01-2024",
                "to": "08-2024",
            },
        )
        assert response.json() == {"unit_price": 100, "total_amount": 800, "total_months": 8}

    @pytest.mark.asyncio
    async def test_no_match_is_zero(self, test_client, user_id):
        response = await test_client.get(
            f"{BASE}/summary",
            params={"user_id": str(user_id), "service_name": "Nothing"},
        )
        assert response.status_code == 200
        assert response.json() == {"unit_price": 0, "total_amount": 0, "total_months": 0}

    @pytest.mark.asyncio
    async def test_window_end_before_start_is_400(self, test_client, user_id):
        response = await test_client.get(
            f"{BASE}/summary",
            params={
                "user_id": str(user_id),
                "service_name": "Yandex Plus",
                "from": "05-2024",
                "to": "01-2024",
            },
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "to"

    @pytest.mark.asyncio
    async def test_future_from_without_to_is_zero(self, test_client, user_id):
        await create(test_client, user_id, start_date="01-2024")

        response = await test_client.get(
            f"{BASE}/summary",
            params={"user_id": str(user_id), "service_name": "Yandex Plus", "from": "01-9999"},
        )
        assert response.status_code == 200
        assert response.json() == {"unit_price": 0, "total_amount": 0, "total_months": 0}

    @pytest.mark.asyncio
    async def test_missing_user_id_is_422(self, test_client):
        response = await test_client.get(f"{BASE}/summary", params={"service_name": "Yandex Plus"})
        assert response.status_code == 422


class TestAmbient:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get(f"{BASE}/1", headers={"X-Request-ID": "trace-abc"})
        assert response.headers["X-Request-ID"] == "trace-abc"
        assert response.json()["request_id"] == "trace-abc"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
