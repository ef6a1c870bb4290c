def buy(client, quantity, price, buyer="Ana"):
    r = client.post("/tickets", json={"buyer_name": buyer, "event_name": "Concert", "quantity": quantity, "price": price})
    assert r.status_code == 201, r.text
    return r.json()


def test_stats_empty(client):
    assert client.get("/stats").json() == {
        "total_tickets": 0,
        "valid_tickets": 0,
        "redeemed_tickets": 0,
        "total_funds": 0,
        "total_people": 0,
        "redeemed_funds": 0,
        "redeemed_people": 0,
        "pending_funds": 0,
        "pending_people": 0,
    }
    assert client.get("/stats/codes").json() == {
        "total_codes": 0,
        "total_uses_remaining": 0,
        "active_codes": 0,
        "fully_used_codes": 0,
    }


def test_concert_scenario(client):
    ticket = buy(client, quantity=2, price=500)
    assert ticket["total"] == 1000
    code_id = ticket["code"]["code_id"]
    assert ticket["code"]["uses_remaining"] == 2

    assert client.post("/codes/redeem", json={"code_id": code_id}).json()["uses_remaining"] == 1
    assert client.post("/codes/redeem", json={"code_id": code_id}).json()["uses_remaining"] == 0
    r = client.post("/codes/redeem", json={"code_id": code_id})
    assert r.status_code == 409
    assert r.json()["error"] == "Exhausted"

    stats = client.get("/stats").json()
    assert stats["total_tickets"] == 1
    assert stats["valid_tickets"] == 1
    assert stats["redeemed_tickets"] == 0
    assert stats["total_funds"] == 1000
    assert stats["pending_funds"] == 1000


def test_stats_split_by_status(client):
    a = buy(client, quantity=2, price=500)
    buy(client, quantity=3, price=100, buyer="Luis")
    client.post("/tickets/redeem", json={"ticket_id": a["id"]})

    stats = client.get("/stats/").json()
    assert stats["total_tickets"] == 2
    assert stats["valid_tickets"] == 1
    assert stats["redeemed_tickets"] == 1
    assert stats["total_funds"] == 1300
    assert stats["total_people"] == 5
    assert stats["redeemed_funds"] == 1000
    assert stats["redeemed_people"] == 2
    assert stats["pending_funds"] == 300
    assert stats["pending_people"] == 3


def test_code_stats(client):
    a = buy(client, quantity=1, price=10)
    buy(client, quantity=4, price=10, buyer="Luis")
    client.post("/codes/redeem", json={"code_id": a["code"]["code_id"]})

    assert client.get("/stats/codes").json() == {
        "total_codes": 2,
        "total_uses_remaining": 4,
        "active_codes": 1,
        "fully_used_codes": 1,
    }
    assert client.get("/api/qr-stats").json() == {
        "total_qrs": 2,
        "total_uses_remaining": 4,
        "active_qrs": 1,
        "fully_used_qrs": 1,
    }
