def _member(**overrides):
    data = {
        "serial_no": 1,
        "name_en": "Chairperson Name",
        "name_bn": "সভাপতির নাম",
        "designation_en": "Chairperson",
        "designation_bn": "সভাপতি",
    }
    data.update(overrides)
    return data


def _official(**overrides):
    data = {
        "name_en": "Secretary Name",
        "name_bn": "সচিবের নাম",
        "position_en": "Secretary",
        "position_bn": "সচিব",
        "department_en": "Secretariat",
        "department_bn": "সচিবালয়",
    }
    data.update(overrides)
    return data


def _term(**overrides):
    data = {
        "title_en": "Inquiry into the 2014 election",
        "title_bn": "২০১৪ সালের নির্বাচনের তদন্ত",
        "description_en": "Examine irregularities.",
        "description_bn": "অনিয়ম পরীক্ষা করা।",
        "section": "mandate",
        "effective_from": "2024-09-01",
    }
    data.update(overrides)
    return data


def test_member_serial_unique_per_role(management_client):
    r = management_client.post("/api/admin/commission/members", json=_member())
    assert r.status_code == 201
    assert r.json["member"]["role_type"] == "commission_member"

    r = management_client.post("/api/admin/commission/members", json=_member())
    assert r.status_code == 400
    assert r.json["error"] == "Serial number already exists for this role type"

    r = management_client.post("/api/admin/commission/members", json=_member(role_type="secretarial_support"))
    assert r.status_code == 201

    r = management_client.post("/api/admin/commission/members", json=_member(serial_no=2, role_type="observer"))
    assert r.status_code == 400
    assert r.json["error"].startswith("Invalid role_type")


def test_member_update_and_delete(management_client):
    mid = management_client.post("/api/admin/commission/members", json=_member()).json["member"]["id"]
    management_client.post("/api/admin/commission/members", json=_member(serial_no=2))

    r = management_client.put(f"/api/admin/commission/members/{mid}", json={"serial_no": 2})
    assert r.status_code == 400

    r = management_client.put(f"/api/admin/commission/members/{mid}", json={"serial_no": 1, "phone": "+880200000"})
    assert r.status_code == 200
    assert r.json["member"]["phone"] == "+880200000"

    r = management_client.get("/api/admin/commission/members?role_type=commission_member")
    assert [m["serial_no"] for m in r.json["members"]] == [1, 2]

    assert management_client.delete(f"/api/admin/commission/members/{mid}").status_code == 200
    assert management_client.get(f"/api/admin/commission/members/{mid}").status_code == 404


def test_official_crud(management_client):
    r = management_client.post("/api/admin/commission/officials", json=_official())
    assert r.status_code == 201
    oid = r.json["official"]["id"]
    assert r.json["official"]["category"] == "SECRETARIAT"

    assert management_client.post("/api/admin/commission/officials", json={"name_en": "x"}).status_code == 400
    r = management_client.put(f"/api/admin/commission/officials/{oid}", json={"order": 2})
    assert r.json["official"]["order"] == 2
    assert management_client.delete(f"/api/admin/commission/officials/{oid}").status_code == 200


def test_term_crud(management_client):
    r = management_client.post("/api/admin/commission/terms", json=_term())
    assert r.status_code == 201
    tid = r.json["term"]["id"]
    assert r.json["term"]["effective_from"].startswith("2024-09-01")

    assert management_client.post("/api/admin/commission/terms", json=_term(effective_from="soon")).status_code == 400
    assert management_client.get("/api/admin/commission/terms?section=mandate").json["pagination"]["total"] == 1
    assert management_client.delete(f"/api/admin/commission/terms/{tid}").status_code == 200


def test_public_endpoints(client, management_client):
    management_client.post("/api/admin/commission/members", json=_member(serial_no=2, name_en="Second"))
    management_client.post("/api/admin/commission/members", json=_member(name_en="First"))
    management_client.post("/api/admin/commission/members", json=_member(serial_no=3, name_en="Gone", is_active=False))
    management_client.post("/api/admin/commission/officials", json=_official())
    management_client.post("/api/admin/commission/terms", json=_term(order=2, title_en="Second term"))
    management_client.post("/api/admin/commission/terms", json=_term(order=1, title_en="First term"))
    management_client.post("/api/admin/commission/terms", json=_term(section="powers", title_en="Powers"))

    r = client.get("/api/public/commission-members")
    assert r.json["total"] == 2
    assert [m["name_en"] for m in r.json["members"]] == ["First", "Second"]
    assert "created_by" not in r.json["members"][0]

    r = client.get("/api/public/commission-officials")
    assert r.json["total"] == 1

    r = client.get("/api/public/commission-scope")
    sections = {s["section"]: s["terms"] for s in r.json["sections"]}
    assert set(sections) == {"mandate", "powers"}
    assert [t["title"]["en"] for t in sections["mandate"]] == ["First term", "Second term"]


def test_members_page_splits_roles(client, management_client):
    management_client.post("/api/admin/commission/members", json=_member(name_bn="কমিশন সদস্য"))
    management_client.post(
        "/api/admin/commission/members", json=_member(role_type="secretarial_support", name_bn="সহায়ক কর্মকর্তা")
    )
    r = client.get("/bn/members")
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert "কমিশন সদস্য" in body
    assert "সহায়ক কর্মকর্তা" in body
