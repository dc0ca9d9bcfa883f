KITCHEN = {"room_type": "kitchen", "length": 10, "width": 8, "price_per_sqft": 150}
CORNICE = {"description": "Cornice moulding", "quantity": 4, "unit_price": 250}


def _quotation(client, headers, **extra):
    payload = {"client_name": "Asha", "items": [KITCHEN]}
    payload.update(extra)
    r = client.post("/quotations", headers=headers, json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_stats_count_only_the_callers_records(client, auth_headers, other_headers):
    _quotation(client, auth_headers)
    _quotation(client, auth_headers)
    _quotation(client, auth_headers, status="FINALIZED")
    client.post("/pop", headers=auth_headers, json={"client_name": "Ravi", "items": [CORNICE]})
    client.post("/materials", headers=auth_headers, json={"name": "Marine plywood 18mm", "price": 95, "unit": "sqft"})

    _quotation(client, other_headers, status="FINALIZED")
    client.post("/materials", headers=other_headers, json={"name": "Gypsum board", "price": 40, "unit": "sqft"})

    r = client.get("/dashboard/stats", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {
        "total_quotations": 3,
        "draft_quotations": 2,
        "finalized_quotations": 1,
        "total_pop_quotations": 1,
        "total_materials": 1,
    }


def test_stats_follow_finalize_and_delete(client, auth_headers):
    first = _quotation(client, auth_headers)
    second = _quotation(client, auth_headers)

    client.put(f"/quotations/{first['id']}", headers=auth_headers, json={"status": "FINALIZED"})
    client.delete(f"/quotations/{second['id']}", headers=auth_headers)

    stats = client.get("/dashboard/stats", headers=auth_headers).json()
    assert (stats["total_quotations"], stats["draft_quotations"], stats["finalized_quotations"]) == (1, 0, 1)


def test_empty_account_has_zero_stats(client, auth_headers):
    stats = client.get("/dashboard/stats", headers=auth_headers).json()
    assert set(stats.values()) == {0}


def test_stats_require_login(client):
    assert client.get("/dashboard/stats").status_code == 401
