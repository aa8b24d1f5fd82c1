import re

import pytest

from portfolio.client.auth import AdminSession
from portfolio.client.local_cache import FileCache, MemoryCache
from portfolio.constants import CERTIFICATE_UPLOAD, RESUME_UPLOAD, TOKEN_KEY
from portfolio.schemas import ByKey, ByUrl, Inline, Resume, SectionRecord, assemble_portfolio
from portfolio.security import create_access_token, hash_password, verify_password
from portfolio.utils.files import (
    FilePayload,
    UploadValidationError,
    format_file_size,
    from_data_url,
    generate_file_name,
    generate_id,
    to_data_url,
    validate_upload,
)

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.mark.parametrize("size,expected", [
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (1024 * 1024, "1 MB"),
    (int(2.25 * 1024 ** 3), "2.25 GB"),
])
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_generate_file_name_sanitizes():
    name = generate_file_name("My CV (v2).pdf")
    assert re.fullmatch(r"My_CV__v2__\d{13}_[a-z0-9]{13}\.pdf", name)
    assert generate_file_name("README").startswith("README_")
    assert generate_file_name("a.pdf") != generate_file_name("a.pdf")


def test_generate_id_unique():
    assert len({generate_id() for _ in range(50)}) == 50


def test_data_url_decoding():
    assert from_data_url(to_data_url(b"\x00\x01hi", "application/pdf")) == b"\x00\x01hi"
    assert from_data_url("aGVsbG8=") == b"hello"
    assert from_data_url("data:text/plain,hello") == b"hello"


def test_validate_upload_order_and_messages():
    big_exe = FilePayload("x.exe", b"0" * (11 * 1024 * 1024), "application/x-msdownload")
    with pytest.raises(UploadValidationError, match="File size exceeds 10MB limit"):
        validate_upload(big_exe, RESUME_UPLOAD)

    with pytest.raises(UploadValidationError, match="File type image/png is not allowed"):
        validate_upload(FilePayload("cv.png", b"x", "image/png"), RESUME_UPLOAD)

    with pytest.raises(UploadValidationError, match=r"File extension \.txt is not allowed"):
        validate_upload(FilePayload("cert.txt", b"x", "application/pdf"), CERTIFICATE_UPLOAD)

    validate_upload(FilePayload("CV.DOCX", b"x", DOCX), RESUME_UPLOAD)


def test_content_ref_resolution():
    base = dict(id="1", name="n", file_name="f.pdf", file_size="1 KB", file_type="application/pdf",
                upload_date="2024-01-01T00:00:00Z")
    assert Resume(**base, storage_type="cloud", cloud_file_name="k", cloud_url="u").content_ref() == ByKey("k")
    assert Resume(**base, storage_type="cloud", cloud_url="u").content_ref() == ByUrl("u")
    assert Resume(**base, file_data="data:,x").content_ref() == Inline("data:,x")
    assert Resume(**base).content_ref() is None


def test_resume_wire_format_is_camel_case():
    r = Resume.model_validate({
        "id": "1", "name": "n", "fileName": "f.pdf", "fileSize": "1 KB",
        "fileType": "application/pdf", "uploadDate": "2024-01-01T00:00:00Z",
        "storageType": "cloud", "cloudFileName": "k",
    })
    dumped = r.to_json_dict()
    assert dumped["cloudFileName"] == "k"
    assert "fileData" not in dumped
    assert dumped["description"] == ""


def test_assemble_portfolio():
    records = [
        SectionRecord(section="projects", data=[{"id": "a"}], updated_at="2024-01-01T00:00:00Z"),
        SectionRecord(section="resumes", data=None, updated_at="2024-03-01T00:00:00Z"),
        SectionRecord(section="education", data=[], updated_at="2024-02-01T00:00:00Z"),
    ]
    doc = assemble_portfolio(records)
    assert doc["resumes"] == []
    assert doc["education"] == []
    assert doc["lastUpdated"] == "2024-03-01T00:00:00Z"
    assert assemble_portfolio([])["resumes"] == []


def test_file_cache_persists_and_survives_corruption(tmp_path):
    path = tmp_path / "cache" / "store.json"
    cache = FileCache(path)
    cache.set("a", "1")
    cache.set("b", "2")
    cache.remove("a")

    assert FileCache(path).get("b") == "2"
    assert FileCache(path).get("a") is None
    assert not path.with_suffix(".json.tmp").exists()

    path.write_text("{broken", encoding="utf-8")
    assert cache.get("b") is None
    cache.set("c", "3")
    assert cache.get("c") == "3"


def test_password_hashing():
    hashed = hash_password("pw")
    assert verify_password("pw", hashed)
    assert not verify_password("other", hashed)
    assert not verify_password("pw", "")
    assert not verify_password("pw", "not-a-hash")


def test_admin_session_reads_token_claims():
    cache = MemoryCache()
    session = AdminSession(cache)
    assert session.is_authenticated() is False
    assert session.session_info() is None

    cache.set(TOKEN_KEY, create_access_token())
    assert session.is_authenticated() is True
    assert session.session_info()["loginTime"]

    cache.set(TOKEN_KEY, create_access_token(seconds=-10))
    assert session.is_authenticated() is False

    session.logout()
    assert session.token() is None
