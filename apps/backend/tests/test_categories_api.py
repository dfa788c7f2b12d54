def _create(client, **payload):
    r = client.post("/api/categories", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_list_by_type(client):
    _create(client, type="expense", major="식비", sub="외식")
    _create(client, type="income", major="급여")

    expense = client.get("/api/categories", params={"type": "expense"}).json()
    assert [(c["major"], c["sub"]) for c in expense] == [("식비", "외식")]


def test_labels_are_normalized_and_unique(client):
    _create(client, type="expense", major=" 식비 ", sub="  외식  ")
    r = client.post("/api/categories", json={"type": "expense", "major": "식비", "sub": "외식"})
    assert r.status_code == 409

    r = client.post("/api/categories", json={"type": "expense", "major": "   "})
    assert r.status_code == 422


def test_update_single_category(client):
    cat = _create(client, type="expense", major="교통", sub="버스")
    r = client.patch(f"/api/categories/{cat['id']}", json={"sub": "지하철"})
    assert r.status_code == 200, r.text
    assert r.json()["sub"] == "지하철"

    assert client.patch(f"/api/categories/{cat['id']}", json={}).status_code == 400


def test_rename_major_across_rows(client):
    _create(client, type="expense", major="생활", sub="마트")
    _create(client, type="expense", major="생활", sub="편의점")
    _create(client, type="income", major="생활", sub="환급")

    r = client.put("/api/categories/major", json={"type": "expense", "old_major": "생활", "new_major": "장보기"})
    assert r.status_code == 200, r.text
    assert r.json() == {"changes": 2}

    income = client.get("/api/categories", params={"type": "income"}).json()
    assert income[0]["major"] == "생활"

    r = client.put("/api/categories/major", json={"type": "expense", "old_major": "없음", "new_major": "x"})
    assert r.status_code == 404


def test_delete_with_reassignment(client, make_account):
    acc = make_account("현금")
    old = _create(client, type="expense", major="취미")
    new = _create(client, type="expense", major="여가")
    other = _create(client, type="income", major="용돈")
    tx = client.post("/api/transactions", json={
        "type": "expense", "year": 2024, "month": 5, "account_id": acc["id"],
        "category_id": old["id"], "amount": 1000,
    }).json()["transaction"]

    assert client.delete(f"/api/categories/{old['id']}", params={"reassign_to": other["id"]}).status_code == 400

    r = client.delete(f"/api/categories/{old['id']}", params={"reassign_to": new["id"]})
    assert r.status_code == 204
    rows = client.get("/api/transactions", params={"year": 2024, "month": 5}).json()
    assert [(row["id"], row["category_id"], row["major"]) for row in rows] == [(tx["id"], new["id"], "여가")]


def test_delete_without_reassignment_clears_category(client, make_account):
    acc = make_account("현금")
    cat = _create(client, type="expense", major="기타")
    client.post("/api/transactions", json={
        "type": "expense", "year": 2024, "month": 5, "account_id": acc["id"],
        "category_id": cat["id"], "amount": 10,
    })

    assert client.delete(f"/api/categories/{cat['id']}").status_code == 204
    rows = client.get("/api/transactions", params={"year": 2024, "month": 5}).json()
    assert rows[0]["category_id"] is None


def _transfer_category(client, type: str, account_name: str) -> dict:
    rows = client.get("/api/categories", params={"type": type}).json()
    return next(c for c in rows if c["major"] == "이체" and c["sub"] == account_name)


def _transfer_pairs(client) -> set:
    return {(c["type"], c["sub"]) for c in client.get("/api/categories").json() if c["major"] == "이체"}


def test_live_transfer_category_cannot_be_deleted(client, make_account):
    make_account("A")
    make_account("B")
    cat = _transfer_category(client, "expense", "B")

    r = client.delete(f"/api/categories/{cat['id']}")
    assert r.status_code == 400
    assert ("expense", "B") in _transfer_pairs(client)


def test_live_transfer_category_cannot_be_edited(client, make_account):
    make_account("A")
    cat = _transfer_category(client, "expense", "A")

    assert client.patch(f"/api/categories/{cat['id']}", json={"sub": "없는계좌"}).status_code == 400
    assert client.patch(f"/api/categories/{cat['id']}", json={"major": "송금"}).status_code == 400
    assert _transfer_pairs(client) == {("income", "A"), ("expense", "A")}


def test_plain_category_cannot_become_transfer(client):
    cat = _create(client, type="expense", major="송금", sub="A")
    r = client.patch(f"/api/categories/{cat['id']}", json={"major": "이체"})
    assert r.status_code == 400


def test_transfer_major_cannot_be_renamed(client, make_account):
    make_account("A")
    _create(client, type="expense", major="송금")

    r = client.put("/api/categories/major", json={"type": "expense", "old_major": "이체", "new_major": "송금"})
    assert r.status_code == 400
    r = client.put("/api/categories/major", json={"type": "expense", "old_major": "송금", "new_major": "이체"})
    assert r.status_code == 400
    assert ("expense", "A") in _transfer_pairs(client)


def test_orphan_transfer_category_can_be_deleted(client):
    cat = _create(client, type="expense", major="이체", sub="사라진계좌")
    assert client.delete(f"/api/categories/{cat['id']}").status_code == 204
