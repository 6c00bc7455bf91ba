import json

from app.neic.db import session_scope
from app.neic.models import UserAuditLog


def _post(**overrides):
    data = {
        "slug": "voter-rights",
        "title_en": "Know your voting rights",
        "title_bn": "আপনার ভোটাধিকার জানুন",
        "excerpt_en": "A short guide.",
        "excerpt_bn": "একটি সংক্ষিপ্ত নির্দেশিকা।",
        "content_en": "Every citizen has the right to vote.",
        "content_bn": "প্রত্যেক নাগরিকের ভোট দেওয়ার অধিকার আছে।",
        "category": "rights",
        "tags": "voting, rights",
    }
    data.update(overrides)
    return data


def test_create_applies_defaults_and_audits(app, management_client):
    r = management_client.post("/api/admin/blog", json=_post())
    assert r.status_code == 201
    post = r.json["post"]
    assert post["slug"] == "voter-rights"
    assert post["tags"] == ["voting", "rights"]
    assert post["read_time"] == 5
    assert post["author_en"]
    assert post["created_by"] == "management@example.com"

    with session_scope(app) as s:
        log = s.query(UserAuditLog).filter(UserAuditLog.action == "blog.create").one()
        details = json.loads(log.details)
    assert details["entity_type"] == "BlogPost"
    assert details["slug"] == "voter-rights"


def test_create_requires_fields_and_unique_slug(management_client):
    r = management_client.post("/api/admin/blog", json={"slug": "x"})
    assert r.status_code == 400
    assert r.json["error"] == "Missing required fields"

    management_client.post("/api/admin/blog", json=_post())
    r = management_client.post("/api/admin/blog", json=_post())
    assert r.status_code == 400
    assert "Slug already exists" in r.json["errors"]


def test_update_records_changes(app, management_client):
    post_id = management_client.post("/api/admin/blog", json=_post()).json["post"]["id"]

    r = management_client.put(f"/api/admin/blog/{post_id}", json={"title_en": ""})
    assert r.status_code == 400

    r = management_client.put(f"/api/admin/blog/{post_id}", json={"featured": True, "read_time": "8"})
    assert r.status_code == 200
    assert r.json["post"]["featured"] is True
    assert r.json["post"]["read_time"] == 8

    with session_scope(app) as s:
        log = s.query(UserAuditLog).filter(UserAuditLog.action == "blog.edit").one()
    assert json.loads(log.details)["changes"]["featured"] == {"old": False, "new": True}


def test_delete_and_404(management_client):
    post_id = management_client.post("/api/admin/blog", json=_post()).json["post"]["id"]
    assert management_client.delete(f"/api/admin/blog/{post_id}").status_code == 200
    r = management_client.get(f"/api/admin/blog/{post_id}")
    assert r.status_code == 404
    assert r.json["error"] == "Blog post not found"


def test_admin_list_search_and_filter(management_client):
    management_client.post("/api/admin/blog", json=_post())
    management_client.post("/api/admin/blog", json=_post(slug="evm", title_en="Electronic voting", category="technology"))

    r = management_client.get("/api/admin/blog?category=technology")
    assert [p["slug"] for p in r.json["posts"]] == ["evm"]
    r = management_client.get("/api/admin/blog?search=rights")
    assert r.json["pagination"]["total"] == 1


def test_public_list_hides_inactive_and_body(client, management_client):
    management_client.post("/api/admin/blog", json=_post())
    management_client.post("/api/admin/blog", json=_post(slug="draft", is_active=False))

    r = client.get("/api/public/blog")
    assert r.status_code == 200
    posts = r.json["posts"]
    assert [p["slug"] for p in posts] == ["voter-rights"]
    assert "content_en" not in posts[0]
    assert client.get("/api/public/blog/draft").status_code == 404


def test_public_detail_with_related(client, management_client):
    management_client.post("/api/admin/blog", json=_post())
    management_client.post("/api/admin/blog", json=_post(slug="women-voters", title_en="Women voters"))
    management_client.post("/api/admin/blog", json=_post(slug="evm", category="technology"))

    r = client.get("/api/public/blog/voter-rights")
    assert r.status_code == 200
    assert r.json["post"]["content_bn"].startswith("প্রত্যেক")
    assert [p["slug"] for p in r.json["related_posts"]] == ["women-voters"]


def test_blog_pages_render(client, management_client):
    management_client.post("/api/admin/blog", json=_post())
    r = client.get("/en/blog")
    assert r.status_code == 200
    assert "Know your voting rights" in r.get_data(as_text=True)

    r = client.get("/bn/blog/voter-rights")
    assert r.status_code == 200
    assert "আপনার ভোটাধিকার জানুন" in r.get_data(as_text=True)
    assert client.get("/bn/blog/missing").status_code == 404
