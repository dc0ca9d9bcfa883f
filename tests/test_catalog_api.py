from quotebook.services import catalog


# -------------------------
# 1) PREDEFINED PRICING
# -------------------------
def test_pricing_crud(client, auth_headers):
    r = client.post("/pricing", headers=auth_headers, json={"type": "kitchen", "price_per_sqft": 150})
    assert r.status_code == 201, r.text
    pid = r.json()["id"]

    r = client.put(
        f"/pricing/{pid}",
        headers=auth_headers,
        json={"type": "kitchen", "price_per_sqft": 175, "description": "Laminate finish"},
    )
    assert r.status_code == 200
    assert r.json()["price_per_sqft"] == 175

    listed = client.get("/pricing", headers=auth_headers).json()
    assert [(p["type"], p["price_per_sqft"]) for p in listed] == [("kitchen", 175)]

    assert client.delete(f"/pricing/{pid}", headers=auth_headers).json() == {"success": True}
    assert client.get(f"/pricing/{pid}", headers=auth_headers).status_code == 404


def test_pricing_type_is_unique_per_owner(client, auth_headers, other_headers):
    client.post("/pricing", headers=auth_headers, json={"type": "wardrobe", "price_per_sqft": 1200})

    r = client.post("/pricing", headers=auth_headers, json={"type": "wardrobe", "price_per_sqft": 999})
    assert r.status_code == 400
    assert r.json() == {"error": "Pricing for this type already exists. Please update instead."}

    # another owner keeps a separate price list
    r = client.post("/pricing", headers=other_headers, json={"type": "wardrobe", "price_per_sqft": 999})
    assert r.status_code == 201


def test_pricing_type_race_is_caught_by_unique_index(client, auth_headers, monkeypatch):
    client.post("/pricing", headers=auth_headers, json={"type": "wardrobe", "price_per_sqft": 1200})

    # a concurrent insert slips past the pre-check
    monkeypatch.setattr(catalog, "_type_taken", lambda *a, **kw: False)

    r = client.post("/pricing", headers=auth_headers, json={"type": "wardrobe", "price_per_sqft": 999})
    assert r.status_code == 400
    assert r.json() == {"error": "Pricing for this type already exists. Please update instead."}
    assert [p["price_per_sqft"] for p in client.get("/pricing", headers=auth_headers).json()] == [1200]


def test_pricing_validation(client, auth_headers):
    r = client.post("/pricing", headers=auth_headers, json={"type": "loft"})
    assert r.status_code == 400
    assert r.json() == {"error": "Type and price per sqft are required"}

    r = client.post("/pricing", headers=auth_headers, json={"type": "loft", "price_per_sqft": -5})
    assert r.status_code == 400


def test_lookup_price(client, auth_headers, other_headers):
    client.post("/pricing", headers=auth_headers, json={"type": "tv_unit", "price_per_sqft": 900})

    r = client.get("/pricing/lookup", headers=auth_headers, params={"type": "tv_unit"})
    assert r.status_code == 200
    assert r.json() == {"type": "tv_unit", "price_per_sqft": 900}

    r = client.get("/pricing/lookup", headers=auth_headers, params={"type": "bed"})
    assert r.json() == {"type": "bed", "price_per_sqft": None}

    r = client.get("/pricing/lookup", headers=other_headers, params={"type": "tv_unit"})
    assert r.json()["price_per_sqft"] is None

    assert client.get("/pricing/lookup", headers=auth_headers).status_code == 400


def test_pricing_is_private(client, auth_headers, other_headers):
    pid = client.post("/pricing", headers=auth_headers, json={"type": "bed", "price_per_sqft": 700}).json()["id"]
    assert client.get(f"/pricing/{pid}", headers=other_headers).status_code == 404
    assert client.delete(f"/pricing/{pid}", headers=other_headers).status_code == 404
    assert client.get("/pricing", headers=other_headers).json() == []


# -------------------------
# 2) MATERIALS
# -------------------------
def test_material_crud(client, auth_headers):
    r = client.post(
        "/materials",
        headers=auth_headers,
        json={"name": "Marine plywood 18mm", "price": 95, "unit": "sqft"},
    )
    assert r.status_code == 201, r.text
    mid = r.json()["id"]

    r = client.put(
        f"/materials/{mid}",
        headers=auth_headers,
        json={"name": "Marine plywood 18mm", "price": 110, "unit": "sqft", "description": "BWP grade"},
    )
    assert r.status_code == 200
    assert r.json()["description"] == "BWP grade"

    assert len(client.get("/materials", headers=auth_headers).json()) == 1
    assert client.delete(f"/materials/{mid}", headers=auth_headers).status_code == 200
    assert client.get("/materials", headers=auth_headers).json() == []


def test_material_requires_name_price_unit(client, auth_headers):
    r = client.post("/materials", headers=auth_headers, json={"name": "Hinges", "price": 40})
    assert r.status_code == 400
    assert r.json() == {"error": "Name, price, and unit are required"}
