import asyncio

from fastapi import FastAPI
from fastapi.testclient import TestClient

from paylive.api.callbacks import build_callback_router
from paylive.integrations.contracts.payments import RESULT_SUCCESS


def _client(handler, **kwargs):
    app = FastAPI()
    app.include_router(build_callback_router(handler, **kwargs))
    return TestClient(app)


def test_get_callback_reaches_handler():
    received = []
    client = _client(received.append)

    response = client.get(
        "/paylive/callback",
        params={"status": "COMPLETED", "cust_ref": "ORD-1", "pay_token": "tok-1", "transac_id": "TX-1"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "received": True,
        "order_id": "ORD-1",
        "status": "COMPLETED",
        "transaction_id": "TX-1",
    }
    assert received[0].token == "tok-1"
    assert received[0].can_confirm


def test_post_form_callback():
    received = []
    client = _client(received.append, path="/hooks/paylive")

    response = client.post(
        "/hooks/paylive",
        content="status=PAID&cust_ref=ORD-C1&transac_id=TX-9",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 200
    assert received[0].order_id == "ORD-C1"
    assert received[0].token is None


def test_post_json_callback():
    received = []
    client = _client(received.append)

    response = client.post(
        "/paylive/callback",
        json={"status": "COMPLETED", "orderId": "ORD-2", "token": "tok-2", "transactionId": "TX-2"},
    )

    assert response.status_code == 200
    assert response.json()["transaction_id"] == "TX-2"
    assert received[0].raw["orderId"] == "ORD-2"


def test_callback_missing_order_reference_is_400():
    received = []
    client = _client(received.append)

    response = client.get("/paylive/callback", params={"status": "COMPLETED"})

    assert response.status_code == 400
    assert "Missing required field" in response.json()["detail"]["message"]
    assert received == []


def test_json_body_must_be_an_object():
    client = _client(lambda callback: None)
    response = client.post("/paylive/callback", json=["not", "an", "object"])
    assert response.status_code == 400


def test_multipart_form_callback():
    received = []
    client = _client(received.append)

    response = client.post(
        "/paylive/callback",
        files={"status": (None, "PAID"), "cust_ref": (None, "ORD-C2"), "transac_id": (None, "TX-3")},
    )

    assert response.status_code == 200
    assert received[0].order_id == "ORD-C2"
    assert received[0].transaction_id == "TX-3"


def test_form_body_with_invalid_utf8_is_400():
    received = []
    client = _client(received.append)

    response = client.post(
        "/paylive/callback",
        content=b"status=PAID&cust_ref=\xff\xfe",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 400
    assert received == []


def test_unsupported_content_type_is_rejected():
    client = _client(lambda callback: None)
    response = client.post(
        "/paylive/callback", content=b"<status/>", headers={"Content-Type": "text/xml"},
    )
    assert response.status_code == 415


def _on_event_loop():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def test_sync_handler_confirms_off_the_event_loop(connector, gateway, ord1):
    confirmations = []
    loop_flags = []

    def handler(callback):
        loop_flags.append(_on_event_loop())
        confirmations.append(connector.confirm_transaction(callback.token, callback.transaction_id))

    client = _client(handler)
    paid = gateway.simulate_payment("ORD-1")

    response = client.get(
        "/paylive/callback",
        params={
            "status": paid.status,
            "cust_ref": paid.order_id,
            "pay_token": paid.token,
            "transac_id": paid.transaction_id,
        },
    )

    assert response.status_code == 200
    assert confirmations == [RESULT_SUCCESS]
    assert loop_flags == [False]


def test_async_handler_runs_on_the_event_loop():
    loop_flags = []

    async def handler(callback):
        loop_flags.append(_on_event_loop())

    client = _client(handler)
    response = client.get("/paylive/callback", params={"status": "PAID", "cust_ref": "ORD-C1"})

    assert response.status_code == 200
    assert loop_flags == [True]
