from sqlalchemy import func, select

from app.models import RedeemableCode, Ticket


def buy(client, **overrides):
    body = {"buyer_name": "Ana", "buyer_email": "ana@example.com", "event_name": "Concert", "quantity": 2, "price": 500}
    body.update(overrides)
    return client.post("/tickets", json=body)


def count_rows(store, model):
    with store.session_scope() as db:
        return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_create_ticket_returns_code_with_all_uses(client):
    r = buy(client)
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["status"] == "valid"
    assert data["total"] == 1000
    assert data["code"]["uses_remaining"] == 2
    assert data["code"]["total_uses"] == 2
    assert data["code"]["uses_consumed"] == 0
    assert data["code"]["fully_redeemed"] is False
    assert data["code"]["qr_image"].startswith("data:image/png;base64,")


def test_create_ticket_without_email(client):
    r = buy(client, buyer_email=None)
    assert r.status_code == 201, r.text
    assert r.json()["buyer_email"] is None


def test_invalid_purchases_write_nothing(client, store):
    bad_bodies = [
        {"quantity": 0},
        {"price": 0},
        {"quantity": -1},
        {"buyer_name": ""},
        {"buyer_name": "   "},
        {"buyer_email": "not-an-email"},
    ]
    for overrides in bad_bodies:
        r = buy(client, **overrides)
        assert r.status_code == 400, (overrides, r.text)
        assert r.json()["error"] == "InvalidInput"
        assert r.json()["retryable"] is False
    r = client.post("/tickets", json={"event_name": "Concert", "quantity": 1, "price": 10})
    assert r.status_code == 400
    assert "buyer_name" in r.json()["detail"]
    assert count_rows(store, Ticket) == 0
    assert count_rows(store, RedeemableCode) == 0


def test_get_ticket_reports_code_usage(client):
    created = buy(client, quantity=3).json()
    code_id = created["code"]["code_id"]
    assert client.post("/codes/redeem", json={"code_id": code_id}).status_code == 200

    r = client.get(f"/tickets/{created['id']}")
    assert r.status_code == 200, r.text
    code = r.json()["code"]
    assert code["code_id"] == code_id
    assert code["uses_remaining"] == 2
    assert code["uses_consumed"] == 1
    assert code["total_uses"] == 3
    assert code["fully_redeemed"] is False


def test_get_unknown_ticket_is_404(client):
    r = client.get("/tickets/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"detail": "Ticket not found", "error": "NotFound", "retryable": False}


def test_list_tickets_newest_first(client):
    ids = [buy(client, buyer_name=f"Buyer {i}").json()["id"] for i in range(3)]
    r = client.get("/tickets")
    assert r.status_code == 200
    assert [t["id"] for t in r.json()] == list(reversed(ids))


def test_validate_ticket_never_mutates(client):
    ticket_id = buy(client).json()["id"]
    for _ in range(2):
        r = client.post("/tickets/validate", json={"ticket_id": ticket_id})
        assert r.status_code == 200
        assert r.json()["valid"] is True
        assert r.json()["message"] == "Ticket valid"
    assert client.get(f"/tickets/{ticket_id}").json()["status"] == "valid"

    r = client.post("/tickets/validate", json={"ticket_id": "nope"})
    assert r.json() == {"valid": False, "message": "Ticket not found", "ticket": None}


def test_redeem_ticket_only_once(client):
    ticket_id = buy(client).json()["id"]
    r1 = client.post("/tickets/redeem", json={"ticket_id": ticket_id})
    assert r1.status_code == 200, r1.text

    r2 = client.post("/tickets/redeem", json={"ticket_id": ticket_id})
    assert r2.status_code == 409
    assert r2.json()["error"] == "AlreadyRedeemed"

    v = client.post("/tickets/validate", json={"ticket_id": ticket_id}).json()
    assert v["valid"] is False
    assert v["ticket"]["status"] == "redeemed"


def test_redeem_unknown_ticket_is_404(client):
    r = client.post("/tickets/redeem", json={"ticket_id": "missing"})
    assert r.status_code == 404
    assert r.json()["error"] == "NotFound"


def test_redeem_requires_ticket_id(client):
    r = client.post("/tickets/redeem", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "InvalidInput"


def test_ticket_redemption_leaves_code_uses_alone(client):
    created = buy(client, quantity=2).json()
    client.post("/tickets/redeem", json={"ticket_id": created["id"]})
    detail = client.get(f"/tickets/{created['id']}").json()
    assert detail["status"] == "redeemed"
    assert detail["code"]["uses_remaining"] == 2


def test_delete_ticket_removes_ticket_and_code(client, store):
    created = buy(client).json()
    other = buy(client, buyer_name="Luis").json()

    r = client.delete(f"/tickets/{created['id']}")
    assert r.status_code == 200, r.text
    assert client.get(f"/tickets/{created['id']}").status_code == 404
    r = client.post("/codes/validate", json={"code_id": created["code"]["code_id"]})
    assert r.json()["valid"] is False
    assert r.json()["error"] == "NotFound"

    assert count_rows(store, Ticket) == 1
    assert count_rows(store, RedeemableCode) == 1
    assert client.get(f"/tickets/{other['id']}").status_code == 200


def test_delete_unknown_ticket_is_404(client):
    r = client.delete("/tickets/missing")
    assert r.status_code == 404


def test_health(client):
    r = client.get("/health/")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_store_errors_are_retryable_500s(client, store):
    code_id = buy(client).json()["code"]["code_id"]
    with store.engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE redeemable_codes")

    r = client.post("/codes/redeem", json={"code_id": code_id})
    assert r.status_code == 500
    assert r.json() == {"detail": "Error redeeming the QR code", "error": "StoreFailure", "retryable": True}
