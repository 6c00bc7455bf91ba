from datetime import datetime, timedelta


def _notice(**overrides):
    data = {
        "title_en": "Hearing schedule",
        "title_bn": "শুনানির সময়সূচি",
        "content_en": "Public hearings start next week.",
        "content_bn": "আগামী সপ্তাহে গণশুনানি শুরু।",
    }
    data.update(overrides)
    return data


def test_create_defaults_and_choice_validation(management_client):
    r = management_client.post("/api/admin/notices", json=_notice())
    assert r.status_code == 201
    notice = r.json["notice"]
    assert notice["type"] == "INFORMATION"
    assert notice["priority"] == "MEDIUM"
    assert notice["attachments"] == []

    r = management_client.post("/api/admin/notices", json=_notice(type="GOSSIP"))
    assert r.status_code == 400
    assert r.json["error"].startswith("Invalid type")

    r = management_client.post("/api/admin/notices", json=_notice(attachments="not-a-list"))
    assert r.status_code == 400


def test_public_excludes_expired_and_pins_first(client, management_client):
    yesterday = (datetime.utcnow() - timedelta(days=1)).isoformat()
    tomorrow = (datetime.utcnow() + timedelta(days=1)).isoformat()
    management_client.post("/api/admin/notices", json=_notice(title_en="Old", expires_at=yesterday))
    management_client.post("/api/admin/notices", json=_notice(title_en="Current", expires_at=tomorrow))
    management_client.post("/api/admin/notices", json=_notice(title_en="Pinned", is_pinned=True))
    management_client.post("/api/admin/notices", json=_notice(title_en="Off", is_active=False))

    r = client.get("/api/public/notices")
    titles = [n["title_en"] for n in r.json["notices"]]
    assert titles[0] == "Pinned"
    assert set(titles) == {"Pinned", "Current"}
    assert "created_by" not in r.json["notices"][0]


def test_public_filters(client, management_client):
    management_client.post("/api/admin/notices", json=_notice(priority="HIGH", category="schedule"))
    management_client.post("/api/admin/notices", json=_notice(priority="LOW"))
    assert client.get("/api/public/notices?priority=HIGH").json["pagination"]["total"] == 1
    assert client.get("/api/public/notices?category=schedule").json["pagination"]["total"] == 1
    assert client.get("/api/public/notices?category=all").json["pagination"]["total"] == 2


def test_admin_update_and_delete(management_client):
    notice_id = management_client.post("/api/admin/notices", json=_notice()).json["notice"]["id"]
    r = management_client.put(f"/api/admin/notices/{notice_id}", json={"type": "URGENT"})
    assert r.json["notice"]["type"] == "URGENT"
    assert management_client.get("/api/admin/notices?type=URGENT").json["pagination"]["total"] == 1
    assert management_client.delete(f"/api/admin/notices/{notice_id}").status_code == 200


def test_home_page_lists_notices(client, management_client):
    management_client.post("/api/admin/notices", json=_notice())
    r = client.get("/bn/")
    assert r.status_code == 200
    assert "শুনানির সময়সূচি" in r.get_data(as_text=True)
    r = client.get("/en/")
    assert "Hearing schedule" in r.get_data(as_text=True)
