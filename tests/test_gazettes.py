def _gazette(**overrides):
    data = {
        "title_en": "Commission formation notification",
        "title_bn": "কমিশন গঠন প্রজ্ঞাপন",
        "gazette_number": "SRO-101/2025",
        "download_url": "https://example.gov.bd/gazette.pdf",
        "category": "formation",
    }
    data.update(overrides)
    return data


def test_create_and_unique_number(management_client):
    r = management_client.post("/api/admin/gazettes", json=_gazette())
    assert r.status_code == 201
    assert r.json["gazette"]["priority"] == "MEDIUM"

    r = management_client.post("/api/admin/gazettes", json=_gazette())
    assert r.status_code == 400
    assert r.json["error"] == "Gazette number already exists"

    assert management_client.post("/api/admin/gazettes", json=_gazette(gazette_number="")).status_code == 400


def test_update_keeps_own_number(management_client):
    gid = management_client.post("/api/admin/gazettes", json=_gazette()).json["gazette"]["id"]
    r = management_client.put(f"/api/admin/gazettes/{gid}", json={"gazette_number": "SRO-101/2025", "priority": "HIGH"})
    assert r.status_code == 200
    assert r.json["gazette"]["priority"] == "HIGH"


def test_public_list_newest_first_and_filtered(client, management_client):
    management_client.post("/api/admin/gazettes", json=_gazette(published_at="2025-01-01T00:00:00"))
    management_client.post(
        "/api/admin/gazettes",
        json=_gazette(gazette_number="SRO-202/2025", category="terms", published_at="2025-03-01T00:00:00"),
    )
    management_client.post("/api/admin/gazettes", json=_gazette(gazette_number="SRO-303/2025", is_active=False))

    r = client.get("/api/public/gazettes")
    numbers = [g["gazette_number"] for g in r.json["gazettes"]]
    assert numbers == ["SRO-202/2025", "SRO-101/2025"]
    assert "is_active" not in r.json["gazettes"][0]

    r = client.get("/api/public/gazettes?category=terms")
    assert r.json["pagination"]["total"] == 1


def test_delete(management_client):
    gid = management_client.post("/api/admin/gazettes", json=_gazette()).json["gazette"]["id"]
    assert management_client.delete(f"/api/admin/gazettes/{gid}").status_code == 200
    assert management_client.delete(f"/api/admin/gazettes/{gid}").status_code == 404
