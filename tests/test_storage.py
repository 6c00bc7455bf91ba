import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from app.neic.routes import public_upload_key
from app.neic.storage import S3Storage, StorageError, build_storage_key, display_filename


def _denied(operation):
    def _raise(**kwargs):
        raise ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, operation)

    return _raise


class FailingS3Client:
    put_object = staticmethod(_denied("PutObject"))
    get_object = staticmethod(_denied("GetObject"))
    delete_object = staticmethod(_denied("DeleteObject"))
    head_object = staticmethod(_denied("HeadObject"))


@pytest.fixture()
def s3():
    return S3Storage(
        endpoint="s3.example.com", region="ap-southeast-1", bucket="neic", access_key_id="k", secret_access_key="s"
    )


def test_display_filename_keeps_bengali():
    assert display_filename("অভিযোগ.pdf") == "অভিযোগ.pdf"
    assert display_filename("C:\\Users\\rahim\\ছবি ১.jpg") == "ছবি ১.jpg"
    assert display_filename("../../etc/passwd") == "passwd"
    assert display_filename("report\x00\n.pdf") == "report.pdf"
    assert display_filename(".htaccess") == "htaccess"
    assert display_filename("") == "attachment.bin"
    assert len(display_filename("ক" * 400 + ".pdf")) == 255


def test_storage_key_extension_is_allow_listed():
    assert build_storage_key("submissions", "অভিযোগ.PDF").endswith(".pdf")
    assert build_storage_key("/gallery/", "photo.png").startswith("gallery/")

    key = build_storage_key("submissions", "notes.html")
    assert key.startswith("submissions/")
    assert "." not in key.rsplit("/", 1)[1]


@pytest.mark.parametrize(
    "key,expected",
    [
        ("gallery/1-abc.png", "gallery/1-abc.png"),
        ("commission/photo.jpg", None),
        ("submissions/1-abc.pdf", None),
        ("gallery/../submissions/1-abc.pdf", None),
        ("gallery/./x.png", None),
        ("gallery//x.png", None),
        ("gallery\\..\\submissions\\x.pdf", None),
        ("../gallery/x.png", None),
    ],
)
def test_public_upload_key(key, expected):
    assert public_upload_key(key) == expected


def test_s3_failures_raise_storage_error(s3, monkeypatch):
    monkeypatch.setattr(S3Storage, "_client", lambda self: FailingS3Client())
    with pytest.raises(StorageError, match="delete"):
        s3.delete("gallery/x.png")
    with pytest.raises(StorageError, match="upload"):
        s3.put_bytes("gallery/x.png", b"data", content_type="image/png")
    with pytest.raises(StorageError, match="download"):
        s3.open("gallery/x.png")
    # A missing object is not an error.
    assert s3.exists("gallery/x.png") is False


def test_s3_connection_failure_on_lookup(s3, monkeypatch):
    class Unreachable:
        def head_object(self, **kwargs):
            raise EndpointConnectionError(endpoint_url="https://s3.example.com")

    monkeypatch.setattr(S3Storage, "_client", lambda self: Unreachable())
    with pytest.raises(StorageError, match="lookup"):
        s3.exists("gallery/x.png")
