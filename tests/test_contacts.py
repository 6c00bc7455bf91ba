def _contact(**overrides):
    data = {"name_en": "Head Office", "name_bn": "প্রধান কার্যালয়", "phone": "+880-2-000000"}
    data.update(overrides)
    return data


def test_crud_and_type_validation(management_client):
    r = management_client.post("/api/admin/contacts", json=_contact())
    assert r.status_code == 201
    cid = r.json["contact"]["id"]
    assert r.json["contact"]["type"] == "OFFICE"

    r = management_client.post("/api/admin/contacts", json=_contact(type="FAX"))
    assert r.status_code == 400

    r = management_client.put(f"/api/admin/contacts/{cid}", json={"type": "HOTLINE", "order": 1})
    assert r.json["contact"]["type"] == "HOTLINE"
    assert management_client.get("/api/admin/contacts?type=hotline").json["pagination"]["total"] == 1

    assert management_client.delete(f"/api/admin/contacts/{cid}").status_code == 200
    assert management_client.get(f"/api/admin/contacts/{cid}").status_code == 404


def test_public_contacts_are_active_and_ordered(client, management_client):
    management_client.post("/api/admin/contacts", json=_contact(name_en="Second", order=2))
    management_client.post("/api/admin/contacts", json=_contact(name_en="First", order=1, type="HOTLINE"))
    management_client.post("/api/admin/contacts", json=_contact(name_en="Closed", is_active=False))

    r = client.get("/api/public/contacts")
    assert r.json["total"] == 2
    assert [c["name_en"] for c in r.json["contacts"]] == ["First", "Second"]
    assert client.get("/api/public/contacts?type=hotline").json["total"] == 1
