def _slider(**overrides):
    data = {
        "title_en": "Public hearings",
        "title_bn": "গণশুনানি",
        "description_en": "Join the hearings.",
        "description_bn": "শুনানিতে যোগ দিন।",
        "image": "/static/img/hearing.jpg",
        "link": "/bn/formation",
    }
    data.update(overrides)
    return data


def test_crud(management_client):
    r = management_client.post("/api/admin/sliders", json=_slider())
    assert r.status_code == 201
    sid = r.json["slider"]["id"]
    assert management_client.post("/api/admin/sliders", json={"title_en": "x"}).status_code == 400

    r = management_client.put(f"/api/admin/sliders/{sid}", json={"featured": "true"})
    assert r.json["slider"]["featured"] is True
    assert management_client.delete(f"/api/admin/sliders/{sid}").status_code == 200


def test_public_shape_with_defaults(client, management_client):
    management_client.post("/api/admin/sliders", json=_slider(order=2, date="2025-02-01"))
    management_client.post(
        "/api/admin/sliders",
        json=_slider(order=1, title_en="First", button_text_en="Read", button_text_bn="পড়ুন"),
    )
    management_client.post("/api/admin/sliders", json=_slider(is_active=False))

    r = client.get("/api/public/sliders")
    data = r.json["sliderData"]
    assert data["title"]["en"] == "Latest Updates"
    slides = data["slides"]
    assert [s["title"]["en"] for s in slides] == ["First", "Public hearings"]
    assert slides[0]["buttonText"] == {"en": "Read", "bn": "পড়ুন"}
    assert slides[1]["buttonText"] == {"en": "Learn More", "bn": "আরও জানুন"}
    assert slides[1]["category"]["bn"] == "আপডেট"
    assert slides[1]["date"] == "2025-02-01"


def test_home_page_shows_slides(client, management_client):
    management_client.post("/api/admin/sliders", json=_slider())
    body = client.get("/bn/").get_data(as_text=True)
    assert "গণশুনানি" in body
    assert "আরও জানুন" in body
