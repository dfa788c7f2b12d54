from datetime import date

PLAN = {
    "type": "savings_plan",
    "bank": "신한",
    "name": "청년적금",
    "start_date": date(2099, 1, 1).isoformat(),
    "interest_rate": 3.0,
    "interest_type": "simple",
    "term_months": 12,
    "amount": 100_000,
    "tax_type": "일반과세",
}


def test_create_provisions_savings_category(client):
    r = client.post("/api/savings-products", json=PLAN)
    assert r.status_code == 201, r.text
    body = r.json()

    assert body["maturity_date"] == "2100-01-01"
    assert (body["principal"], body["interest"], body["tax"]) == (1_200_000, 19_500, 3_003)
    assert body["total_amount"] == 1_216_497
    assert body["paid_status"] == "0/12"

    cats = client.get("/api/categories", params={"type": "expense"}).json()
    saving = [c for c in cats if c["id"] == body["category_id"]]
    assert [(c["major"], c["sub"]) for c in saving] == [("저축", "신한(적금)")]


def test_payments_are_counted(client, make_account):
    acc = make_account("A")
    product = client.post("/api/savings-products", json=PLAN).json()
    for month in (1, 2):
        r = client.post("/api/transactions", json={
            "type": "expense", "year": 2099, "month": month, "account_id": acc["id"],
            "category_id": product["category_id"], "amount": 100_000,
        })
        assert r.status_code == 201, r.text

    body = client.get(f"/api/savings-products/{product['id']}").json()
    assert body["paid_total"] == 200_000
    assert body["paid_count"] == 2
    assert body["paid_status"] == "2/12"


def test_invalid_terms_are_rejected(client):
    assert client.post("/api/savings-products", json={**PLAN, "term_months": 0}).status_code == 400
    assert client.post("/api/savings-products", json={**PLAN, "amount": 0}).status_code == 400
    assert client.post("/api/savings-products", json={**PLAN, "interest_rate": -1}).status_code == 422


def test_update_list_and_delete(client):
    product = client.post("/api/savings-products", json=PLAN).json()
    deposit = client.post("/api/savings-products", json={
        **PLAN, "type": "deposit", "bank": "우리", "amount": 1_000_000, "start_date": "2098-01-01",
    }).json()

    r = client.put(f"/api/savings-products/{product['id']}", json={**PLAN, "memo": "해지", "is_active": False})
    assert r.status_code == 200, r.text
    assert r.json()["is_active"] is False
    assert r.json()["category_id"] == product["category_id"]

    all_ids = [p["id"] for p in client.get("/api/savings-products").json()]
    assert all_ids == [product["id"], deposit["id"]]
    active = client.get("/api/savings-products", params={"active_only": True}).json()
    assert [p["id"] for p in active] == [deposit["id"]]

    assert client.delete(f"/api/savings-products/{product['id']}").status_code == 204
    assert client.get(f"/api/savings-products/{product['id']}").status_code == 404


def test_deleted_category_counts_as_zero_paid(client):
    product = client.post("/api/savings-products", json={**PLAN, "initial_paid": 200_000}).json()
    assert client.delete(f"/api/categories/{product['category_id']}").status_code == 204

    body = client.get(f"/api/savings-products/{product['id']}").json()
    assert body["category_id"] is None
    assert body["paid_total"] == 200_000
