# backend/tests/test_contact_api.py
from fastapi.testclient import TestClient

from app.api.api_v1.endpoints.contact import get_mail_settings, get_transport_factory
from app.core.config import MailSettings
from app.main import app

from conftest import RecordingTransport

URL = "/api/contact/"


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_successful_submission(client, transport):
    resp = client.post(URL, json={"name": "김철수", "phone": "010-1234-5678", "product_type": "정수기"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    assert resp.headers["content-type"].startswith("application/json")

    (mail,) = transport.sent
    assert mail.subject == "[에코] 정수기 | 김철수 | 010-1234-5678"
    assert mail.reply_to is None


def test_path_without_trailing_slash(client, transport):
    resp = client.post("/api/contact", json={"name": "a", "phone": "1", "product_type": "비데"})
    assert resp.status_code == 200
    assert len(transport.sent) == 1


def test_missing_name(client, transport):
    resp = client.post(URL, json={"name": "", "phone": "010-1111-2222", "product_type": "비데"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "필수 항목이 누락되었습니다."}
    assert transport.sent == []


def test_malformed_json_body(client):
    resp = client.post(URL, content=b'{"name": "a", ', headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "필수 항목이 누락되었습니다."}


def test_deeply_nested_json_body(client):
    resp = client.post(URL, content=b"[" * 200000, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "필수 항목이 누락되었습니다."}


def test_options_preflight(client):
    resp = client.request("OPTIONS", URL, content=b"anything", headers={"Origin": "https://eco.example"})
    assert resp.status_code == 204
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "https://eco.example"


def test_other_methods_not_allowed(client):
    for call in (client.get, client.put, client.delete):
        resp = call(URL)
        assert resp.status_code == 405
        assert resp.json() == {"message": "Method Not Allowed"}


def test_missing_mail_configuration(client, transport):
    app.dependency_overrides[get_mail_settings] = lambda: MailSettings.from_env({})
    resp = client.post(URL, json={"name": "김철수", "phone": "010-1234-5678", "product_type": "정수기"})
    assert resp.status_code == 500
    assert resp.json() == {"message": "메일 서버 설정이 필요합니다."}
    assert transport.settings_seen == []


def test_transport_failure(client, transport):
    transport.fail = True
    resp = client.post(URL, json={"name": "김철수", "phone": "010-1234-5678", "product_type": "정수기"})
    assert resp.status_code == 500
    assert resp.json() == {"message": "메일 전송에 실패했습니다."}


def test_settings_are_read_from_environment(monkeypatch):
    # No settings override: the route builds MailSettings from os.environ.
    for key, value in {
        "SMTP_HOST": "smtp.example.com",
        "SMTP_PORT": "587",
        "SMTP_USER": "relay@example.com",
        "SMTP_PASS": "secret",
        "MAIL_TO": "sales@example.com",
    }.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("MAIL_FROM", raising=False)

    recorder = RecordingTransport()
    app.dependency_overrides[get_transport_factory] = lambda: recorder.factory
    try:
        resp = TestClient(app).post(URL, json={"name": "a", "phone": "1", "product_type": "비데"})
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 200
    (cfg,) = recorder.settings_seen
    assert cfg.port == 587
    assert cfg.use_tls is False
    assert recorder.sent[0].sender == "relay@example.com"
