def _faq(**overrides):
    data = {
        "question_en": "How do I submit a complaint?",
        "question_bn": "আমি কীভাবে অভিযোগ জমা দেব?",
        "answer_en": "Use the submission form.",
        "answer_bn": "জমাদান ফর্ম ব্যবহার করুন।",
        "category": "general",
    }
    data.update(overrides)
    return data


def test_crud(management_client):
    r = management_client.post("/api/admin/faq", json=_faq())
    assert r.status_code == 201
    faq_id = r.json["faq"]["id"]

    r = management_client.put(f"/api/admin/faq/{faq_id}", json={"order": 3})
    assert r.json["faq"]["order"] == 3

    assert management_client.post("/api/admin/faq", json={"question_en": "Q"}).status_code == 400
    assert management_client.delete(f"/api/admin/faq/{faq_id}").status_code == 200
    assert management_client.get(f"/api/admin/faq/{faq_id}").status_code == 404


def test_public_groups_active_faqs(client, management_client):
    management_client.post("/api/admin/faq", json=_faq())
    management_client.post("/api/admin/faq", json=_faq(category="technical", question_en="Site is down?"))
    management_client.post("/api/admin/faq", json=_faq(category="complaints", question_en="Other?"))
    management_client.post("/api/admin/faq", json=_faq(question_en="Hidden", is_active=False))

    r = client.get("/api/public/faq")
    assert r.status_code == 200
    page = r.json["faqPage"]
    assert page["header"]["title"]["bn"] == "প্রায়শই জিজ্ঞাসিত প্রশ্ন"
    groups = {g["id"]: g for g in page["categories"]}
    assert [f["question"]["en"] for f in groups["general"]["faqs"]] == ["How do I submit a complaint?"]
    assert groups["services"]["faqs"] == []
    assert [f["question"]["en"] for f in groups["technical"]["faqs"]] == ["Site is down?"]
    assert [f["question"]["en"] for f in groups["other"]["faqs"]] == ["Other?"]
