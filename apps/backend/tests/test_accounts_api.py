def test_first_account_becomes_main(client, make_account):
    a = make_account("월급통장")
    b = make_account("생활비")

    assert a["is_main"] is True
    assert b["is_main"] is False


def test_setting_main_moves_flag(client, make_account):
    a = make_account("A")
    b = make_account("B", is_main=True)

    rows = {row["id"]: row for row in client.get("/api/accounts").json()}
    assert rows[b["id"]]["is_main"] is True
    assert rows[a["id"]]["is_main"] is False

    r = client.patch(f"/api/accounts/{a['id']}", json={"is_main": True})
    assert r.status_code == 200, r.text
    rows = {row["id"]: row for row in client.get("/api/accounts").json()}
    assert [acc_id for acc_id, row in rows.items() if row["is_main"]] == [a["id"]]


def test_duplicate_account_name_conflicts(client, make_account):
    make_account("현금")
    r = client.post("/api/accounts", json={"name": " 현금 "})
    assert r.status_code == 409


def test_account_creation_provisions_transfer_categories(client, make_account):
    make_account("카카오뱅크")
    cats = client.get("/api/categories").json()
    transfer = [(c["type"], c["sub"]) for c in cats if c["major"] == "이체"]
    assert sorted(transfer) == [("expense", "카카오뱅크"), ("income", "카카오뱅크")]
    assert all(c["is_transfer"] for c in cats if c["major"] == "이체")


def test_rename_propagates_to_transfer_categories(client, make_account):
    a = make_account("A")
    r = client.patch(f"/api/accounts/{a['id']}", json={"name": "A2"})
    assert r.status_code == 200, r.text
    assert r.json()["name"] == "A2"

    subs = {c["sub"] for c in client.get("/api/categories").json() if c["major"] == "이체"}
    assert subs == {"A2"}


def test_delete_account_removes_mirrors_and_promotes_main(client, make_account, category_id):
    a = make_account("A")
    b = make_account("B")
    r = client.post("/api/transactions", json={
        "type": "expense", "year": 2024, "month": 3, "day": 1,
        "account_id": b["id"], "category_id": category_id("expense", "이체", "A"), "amount": 300,
    })
    assert r.status_code == 201, r.text
    assert r.json()["mirror_transaction"]["account_id"] == a["id"]
    r = client.post("/api/transactions", json={
        "type": "expense", "year": 2024, "month": 3, "day": 2,
        "account_id": b["id"], "category_id": category_id("expense", "식비"), "amount": 20,
    })
    assert r.status_code == 201, r.text

    r = client.delete(f"/api/accounts/{a['id']}")
    assert r.status_code == 204

    # 이체 쌍은 양쪽 모두 사라지고 B의 일반 거래만 남는다
    rows = client.get("/api/transactions", params={"year": 2024, "month": 3}).json()
    assert [(row["account_id"], row["amount"], row["major"]) for row in rows] == [(b["id"], 20, "식비")]

    accounts = client.get("/api/accounts").json()
    assert [(acc["name"], acc["is_main"]) for acc in accounts] == [("B", True)]
    assert not any(c["sub"] == "A" for c in client.get("/api/categories").json())


def test_balance_includes_transfer_legs(client, make_account, category_id):
    a = make_account("A", initial_balance=1000)
    b = make_account("B")
    client.post("/api/transactions", json={
        "type": "expense", "year": 2024, "month": 1, "account_id": a["id"],
        "category_id": category_id("expense", "이체", "B"), "amount": 400,
    })

    balances = {row["name"]: row["balance"] for row in client.get("/api/accounts").json()}
    assert balances == {"A": 600, "B": 400}


def test_missing_account_returns_404(client):
    assert client.patch("/api/accounts/999", json={"name": "x"}).status_code == 404
    assert client.delete("/api/accounts/999").status_code == 404
