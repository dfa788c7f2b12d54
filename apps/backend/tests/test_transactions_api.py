def _post(client, **payload):
    r = client.post("/api/transactions", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_transfer_round_trip_through_api(client, make_account, category_id):
    a = make_account("A")
    b = make_account("B")
    body = _post(
        client, type="expense", year=2024, month=3, day=10, account_id=a["id"],
        category_id=category_id("expense", "이체", "B"), amount=50, description="용돈",
    )
    tx, mirror = body["transaction"], body["mirror_transaction"]
    assert tx["linked_transaction_id"] == mirror["id"]
    assert mirror["linked_transaction_id"] == tx["id"]
    assert mirror["type"] == "income"
    assert mirror["account_id"] == b["id"]

    rows = client.get("/api/transactions", params={"year": 2024, "month": 3, "account_id": b["id"]}).json()
    assert len(rows) == 1
    assert (rows[0]["major"], rows[0]["sub"], rows[0]["account_name"]) == ("이체", "A", "B")

    r = client.patch(f"/api/transactions/{tx['id']}", json={"amount": 80})
    assert r.status_code == 200, r.text
    rows = client.get("/api/transactions", params={"year": 2024, "month": 3}).json()
    assert sorted(row["amount"] for row in rows) == [80, 80]

    assert client.delete(f"/api/transactions/{tx['id']}").status_code == 204
    assert client.get("/api/transactions", params={"year": 2024, "month": 3}).json() == []


def test_list_filters_and_ordering(client, make_account, category_id):
    acc = make_account("현금")
    food = category_id("expense", "식비")
    salary = category_id("income", "급여")
    _post(client, type="expense", year=2024, month=4, day=20, account_id=acc["id"], category_id=food, amount=3)
    _post(client, type="expense", year=2024, month=4, day=2, account_id=acc["id"], category_id=food, amount=1)
    _post(client, type="income", year=2024, month=4, day=15, account_id=acc["id"], category_id=salary, amount=2)
    _post(client, type="income", year=2024, month=5, day=1, account_id=acc["id"], category_id=salary, amount=9)

    rows = client.get("/api/transactions", params={"year": 2024, "month": 4}).json()
    assert [row["amount"] for row in rows] == [1, 2, 3]

    rows = client.get("/api/transactions", params={"year": 2024, "month": 4, "type": "income"}).json()
    assert [row["amount"] for row in rows] == [2]


def test_invalid_payloads(client, make_account, category_id):
    acc = make_account("현금")
    food = category_id("expense", "식비")

    r = client.post("/api/transactions", json={
        "type": "expense", "year": 2024, "month": 4, "account_id": acc["id"], "category_id": food, "amount": 0,
    })
    assert r.status_code == 422

    r = client.post("/api/transactions", json={
        "type": "income", "year": 2024, "month": 4, "account_id": acc["id"], "category_id": food, "amount": 5,
    })
    assert r.status_code == 400

    r = client.post("/api/transactions", json={
        "type": "expense", "year": 2024, "month": 4, "account_id": 999, "category_id": food, "amount": 5,
    })
    assert r.status_code == 400

    tx = _post(client, type="expense", year=2024, month=4, account_id=acc["id"], category_id=food, amount=5)
    r = client.patch(f"/api/transactions/{tx['transaction']['id']}", json={"amount": None})
    assert r.status_code == 400
    assert client.patch("/api/transactions/999", json={"amount": 1}).status_code == 404
