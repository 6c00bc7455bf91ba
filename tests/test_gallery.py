import io
from pathlib import Path

from botocore.exceptions import ClientError

from app.neic.storage import S3Storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _upload(client, **fields):
    data = {"title_en": "Hearing in Dhaka", "title_bn": "ঢাকায় শুনানি", "category": "events"}
    data.update(fields)
    data.setdefault("file", (io.BytesIO(PNG), "photo.png", "image/png"))
    return client.post("/api/admin/gallery", data=data, content_type="multipart/form-data")


def test_create_requires_image(management_client):
    r = management_client.post("/api/admin/gallery", json={"title_en": "x", "title_bn": "y"})
    assert r.status_code == 400
    assert r.json["error"] == "Image file is required"


def test_create_rejects_non_image(management_client):
    r = _upload(management_client, file=(io.BytesIO(b"%PDF"), "doc.pdf", "application/pdf"))
    assert r.status_code == 400


def test_upload_is_stored_and_served(client, management_client, tmp_path):
    r = _upload(management_client, tags='["dhaka", "hearing"]')
    assert r.status_code == 201
    item = r.json["item"]
    assert item["image_key"].startswith("gallery/")
    assert item["image_url"] == f"/uploads/{item['image_key']}"
    assert item["tags"] == ["dhaka", "hearing"]
    assert (Path(tmp_path) / "storage" / item["image_key"]).exists()

    r = client.get(item["image_url"])
    assert r.status_code == 200
    assert r.data == PNG


def test_replacing_image_removes_old_file(management_client, tmp_path):
    item = _upload(management_client).json["item"]
    old_key = item["image_key"]

    r = management_client.put(
        f"/api/admin/gallery/{item['id']}",
        data={"title_en": "Renamed", "image": (io.BytesIO(PNG), "new.png", "image/png")},
        content_type="multipart/form-data",
    )
    assert r.status_code == 200
    assert r.json["item"]["title_en"] == "Renamed"
    assert r.json["item"]["image_key"] != old_key
    assert not (Path(tmp_path) / "storage" / old_key).exists()


def test_delete_removes_file(management_client, tmp_path):
    item = _upload(management_client).json["item"]
    assert management_client.delete(f"/api/admin/gallery/{item['id']}").status_code == 200
    assert not (Path(tmp_path) / "storage" / item["image_key"]).exists()
    assert management_client.get(f"/api/admin/gallery/{item['id']}").status_code == 404


def test_delete_survives_storage_failure(management_client, monkeypatch):
    item = _upload(management_client).json["item"]

    class DeniedClient:
        def delete_object(self, **kwargs):
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "DeleteObject")

    s3 = S3Storage(endpoint="", region="ap-southeast-1", bucket="neic", access_key_id="k", secret_access_key="s")
    monkeypatch.setattr(S3Storage, "_client", lambda self: DeniedClient())
    monkeypatch.setattr("app.neic.modules.gallery.admin.storage_from_config", lambda config: s3)

    r = management_client.delete(f"/api/admin/gallery/{item['id']}")
    assert r.status_code == 200
    assert management_client.get(f"/api/admin/gallery/{item['id']}").status_code == 404

def test_public_gallery(client, management_client):
    _upload(management_client)
    _upload(management_client, title_en="Team photo", category="team", featured="true")
    _upload(management_client, title_en="Hidden", category="meetings", is_active="false")

    r = client.get("/api/public/gallery")
    assert r.status_code == 200
    assert [i["title_en"] for i in r.json["items"]] == ["Team photo", "Hearing in Dhaka"]
    assert "image_key" not in r.json["items"][0]
    assert r.json["categories"] == ["events", "team"]
    assert r.json["pagination"]["limit"] == 24

    assert client.get("/api/public/gallery?category=team").json["pagination"]["total"] == 1
    assert client.get("/api/public/gallery?featured=true").json["pagination"]["total"] == 1
