import uuid

from sqlalchemy import select

from velvet_routes.models.payment import Payment


async def _create_payment(client, headers, **body):
    resp = await client.post(
        "/api/create-payment-intent", json={"amount": 1200, **body}, headers=headers
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


async def test_create_payment_intent(client, register):
    _, headers = await register()
    body = await _create_payment(client, headers, currency="eur", metadata={"planName": "Goa"})

    assert body["success"] is True
    assert body["clientSecret"]
    intent = body["paymentIntent"]
    assert intent["paymentId"].startswith("pi_")
    assert intent["amount"] == 1200
    assert intent["currency"] == "EUR"


async def test_default_currency(client, register):
    _, headers = await register()
    body = await _create_payment(client, headers)
    assert body["paymentIntent"]["currency"] == "USD"


async def test_amount_must_be_positive(client, register):
    _, headers = await register()
    resp = await client.post("/api/create-payment-intent", json={"amount": 0}, headers=headers)
    assert resp.status_code == 400


async def test_confirm_is_idempotent(client, register):
    _, headers = await register()
    payment_id = (await _create_payment(client, headers))["paymentIntent"]["paymentId"]

    for _ in range(2):
        resp = await client.post(
            "/api/confirm-payment", json={"paymentIntentId": payment_id}, headers=headers
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["payment"]["status"] == "succeeded"
        assert body["planUpdated"] is None


async def test_confirm_unknown_payment(client, register, db):
    _, headers = await register()
    payment_id = (await _create_payment(client, headers))["paymentIntent"]["paymentId"]

    resp = await client.post(
        "/api/confirm-payment", json={"paymentIntentId": "pi_missing"}, headers=headers
    )
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Payment not found"}

    statuses = (await db.execute(select(Payment.payment_id, Payment.status))).all()
    assert statuses == [(payment_id, "pending")]


async def test_cannot_confirm_someone_elses_payment(client, register):
    _, a = await register("a@x.com")
    _, b = await register("b@x.com")
    payment_id = (await _create_payment(client, a))["paymentIntent"]["paymentId"]

    resp = await client.post("/api/confirm-payment", json={"paymentIntentId": payment_id}, headers=b)
    assert resp.status_code == 404

    resp = await client.post("/api/confirm-payment", json={"paymentIntentId": payment_id}, headers=a)
    assert resp.json()["payment"]["status"] == "succeeded"


async def test_confirm_stamps_plan_once(client, register):
    _, headers = await register()
    plan = (await client.post("/api/plans/save-current", json={"destination": "Goa"}, headers=headers)).json()["data"]
    payment_id = (await _create_payment(client, headers))["paymentIntent"]["paymentId"]

    resp = await client.post(
        "/api/confirm-payment",
        json={"paymentIntentId": payment_id, "planId": plan["id"]},
        headers=headers,
    )
    assert resp.json()["planUpdated"] is True

    paid = (await client.get(f"/api/plans/{plan['id']}", headers=headers)).json()["data"]
    assert paid["paymentStatus"] == "completed"
    assert paid["paidAt"]

    await client.post(
        "/api/confirm-payment",
        json={"paymentIntentId": payment_id, "planId": plan["id"]},
        headers=headers,
    )
    again = (await client.get(f"/api/plans/{plan['id']}", headers=headers)).json()["data"]
    assert again["paidAt"] == paid["paidAt"]


async def test_missing_plan_does_not_fail_confirmation(client, register):
    _, headers = await register()
    payment_id = (await _create_payment(client, headers))["paymentIntent"]["paymentId"]

    resp = await client.post(
        "/api/confirm-payment",
        json={"paymentIntentId": payment_id, "planId": str(uuid.uuid4())},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["payment"]["status"] == "succeeded"
    assert resp.json()["planUpdated"] is False


async def test_cannot_stamp_someone_elses_plan(client, register):
    _, a = await register("a@x.com")
    _, b = await register("b@x.com")
    plan = (await client.post("/api/plans/save-current", json={"destination": "Goa"}, headers=a)).json()["data"]
    payment_id = (await _create_payment(client, b))["paymentIntent"]["paymentId"]

    resp = await client.post(
        "/api/confirm-payment", json={"paymentIntentId": payment_id, "planId": plan["id"]}, headers=b
    )
    assert resp.json()["planUpdated"] is False

    untouched = (await client.get(f"/api/plans/{plan['id']}", headers=a)).json()["data"]
    assert untouched["paymentStatus"] is None


async def test_non_uuid_plan_id_still_confirms(client, register):
    _, headers = await register()
    payment_id = (await _create_payment(client, headers))["paymentIntent"]["paymentId"]

    for plan_id in (42, "not-a-plan"):
        resp = await client.post(
            "/api/confirm-payment",
            json={"paymentIntentId": payment_id, "planId": plan_id},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["payment"]["status"] == "succeeded"
        assert resp.json()["planUpdated"] is False
