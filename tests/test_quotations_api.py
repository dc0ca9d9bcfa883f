from quotebook.services.numbering import current_year

KITCHEN = {"room_type": "kitchen", "length": 10, "width": 8, "price_per_sqft": 150}
WARDROBE = {"room_type": "wardrobe", "length": 6, "width": 7, "price_per_sqft": 1200}


def _create(client, headers, **overrides):
    payload = {"client_name": "Asha", "client_phone": "+91 98765 43210", "items": [KITCHEN]}
    payload.update(overrides)
    return client.post("/quotations", headers=headers, json=payload)


# -------------------------
# 1) CREATE
# -------------------------
def test_create_draft_quotation(client, auth_headers, user):
    r = _create(client, auth_headers)
    assert r.status_code == 201, r.text
    data = r.json()

    assert data["quotation_number"] == f"QT-{current_year()}-0001"
    assert data["status"] == "DRAFT"
    assert data["finalized_at"] is None
    assert data["owner_id"] == user.id
    assert data["total_amount"] == 12000
    assert data["items"][0]["area"] == 80
    assert data["items"][0]["total_price"] == 12000
    assert data["progress"] == []
    assert data["latest_progress"] is None


def test_create_finalized_quotation_seeds_progress(client, auth_headers):
    r = _create(client, auth_headers, status="FINALIZED")
    assert r.status_code == 201, r.text
    data = r.json()

    assert data["status"] == "FINALIZED"
    assert data["finalized_at"] is not None
    assert len(data["progress"]) == 1
    assert data["latest_progress"]["status"] == "NOT_STARTED"
    assert data["latest_progress"]["percentage"] == 0


def test_create_requires_client_name_and_items(client, auth_headers):
    r = _create(client, auth_headers, client_name="   ")
    assert r.status_code == 400
    assert r.json() == {"error": "Client name is required"}

    r = _create(client, auth_headers, items=[])
    assert r.status_code == 400
    assert r.json() == {"error": "At least one item is required"}


def test_create_rejects_bad_payload_types(client, auth_headers):
    r = _create(client, auth_headers, items=[{"room_type": "kitchen", "length": "ten", "width": 8, "price_per_sqft": 150}])
    assert r.status_code == 400
    assert "error" in r.json()


def test_requests_without_token_are_rejected(client):
    r = client.get("/quotations")
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}

    r = client.get("/quotations", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


# -------------------------
# 2) READ
# -------------------------
def test_list_filters_by_status_and_owner(client, auth_headers, other_headers):
    _create(client, auth_headers, client_name="Draft One")
    _create(client, auth_headers, client_name="Final One", status="FINALIZED")
    _create(client, other_headers, client_name="Someone Else")

    everything = client.get("/quotations", headers=auth_headers).json()
    assert {q["client_name"] for q in everything} == {"Draft One", "Final One"}
    # newest first
    assert everything[0]["client_name"] == "Final One"

    finalized = client.get("/quotations", params={"status": "FINALIZED"}, headers=auth_headers).json()
    assert [q["client_name"] for q in finalized] == ["Final One"]

    r = client.get("/quotations", params={"status": "ARCHIVED"}, headers=auth_headers)
    assert r.status_code == 400


def test_get_is_scoped_to_owner(client, auth_headers, other_headers):
    qid = _create(client, auth_headers).json()["id"]

    assert client.get(f"/quotations/{qid}", headers=auth_headers).status_code == 200
    r = client.get(f"/quotations/{qid}", headers=other_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "Quotation not found"}


# -------------------------
# 3) UPDATE / DELETE
# -------------------------
def test_update_replaces_items_and_recomputes_total(client, auth_headers):
    created = _create(client, auth_headers).json()

    r = client.put(
        f"/quotations/{created['id']}",
        headers=auth_headers,
        json={"client_address": "12 MG Road", "items": [KITCHEN, WARDROBE]},
    )
    assert r.status_code == 200, r.text
    data = r.json()

    assert data["quotation_number"] == created["quotation_number"]
    assert data["client_name"] == "Asha"
    assert data["client_address"] == "12 MG Road"
    assert len(data["items"]) == 2
    assert data["total_amount"] == 12000 + 42 * 1200


def test_update_without_items_keeps_them(client, auth_headers):
    created = _create(client, auth_headers).json()
    data = client.put(f"/quotations/{created['id']}", headers=auth_headers, json={"notes": "Call first"}).json()
    assert data["notes"] == "Call first"
    assert len(data["items"]) == 1
    assert data["total_amount"] == 12000


def test_finalize_via_update(client, auth_headers):
    created = _create(client, auth_headers).json()
    data = client.put(f"/quotations/{created['id']}", headers=auth_headers, json={"status": "FINALIZED"}).json()

    assert data["status"] == "FINALIZED"
    assert data["finalized_at"] is not None
    assert len(data["progress"]) == 1


def test_finalized_quotation_cannot_change(client, auth_headers):
    qid = _create(client, auth_headers, status="FINALIZED").json()["id"]

    r = client.put(f"/quotations/{qid}", headers=auth_headers, json={"client_name": "Changed"})
    assert r.status_code == 400
    assert r.json() == {"error": "Cannot edit finalized quotation"}

    r = client.delete(f"/quotations/{qid}", headers=auth_headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Cannot delete finalized quotation"}

    assert client.get(f"/quotations/{qid}", headers=auth_headers).json()["client_name"] == "Asha"


def test_writes_by_another_owner(client, auth_headers, other_headers):
    qid = _create(client, auth_headers).json()["id"]

    r = client.put(f"/quotations/{qid}", headers=other_headers, json={"notes": "mine now"})
    assert r.status_code == 403
    assert r.json() == {"error": "Unauthorized to update this quotation"}

    r = client.delete(f"/quotations/{qid}", headers=other_headers)
    assert r.status_code == 403

    r = client.delete("/quotations/does-not-exist", headers=auth_headers)
    assert r.status_code == 404


def test_delete_draft(client, auth_headers):
    qid = _create(client, auth_headers).json()["id"]

    r = client.delete(f"/quotations/{qid}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert client.get(f"/quotations/{qid}", headers=auth_headers).status_code == 404


# -------------------------
# 4) PROGRESS / DOCUMENT
# -------------------------
def test_progress_endpoints(client, auth_headers):
    qid = _create(client, auth_headers, status="FINALIZED").json()["id"]

    r = client.post(
        f"/quotations/{qid}/progress",
        headers=auth_headers,
        json={"status": "IN_PROGRESS", "percentage": 60, "note": "Shutters pending"},
    )
    assert r.status_code == 201, r.text
    assert r.json()["updated_by"] == "Asha Designs"

    history = client.get(f"/quotations/{qid}/progress", headers=auth_headers).json()
    assert [h["percentage"] for h in history] == [60, 0]

    r = client.post(f"/quotations/{qid}/progress", headers=auth_headers, json={"status": "IN_PROGRESS", "percentage": 120})
    assert r.status_code == 400


def test_progress_on_draft_is_rejected(client, auth_headers):
    qid = _create(client, auth_headers).json()["id"]
    r = client.post(f"/quotations/{qid}/progress", headers=auth_headers, json={"status": "IN_PROGRESS", "percentage": 10})
    assert r.status_code == 400


def test_html_document(client, auth_headers):
    created = _create(client, auth_headers).json()

    r = client.get(f"/quotations/{created['id']}/document", headers=auth_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert created["quotation_number"] in r.text
    assert "Rs. 12000.00" in r.text

    r = client.get(f"/quotations/{created['id']}/document", params={"format": "docx"}, headers=auth_headers)
    assert r.status_code == 400


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
