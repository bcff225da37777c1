import pytest
import requests

# Bound before the autouse fixture swaps the module attribute
from zelene.services.captcha import verify


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload, self.status_code = payload, status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")

    def json(self):
        return self._payload


@pytest.fixture()
def posted(monkeypatch):
    calls = []

    def install(response=None, exc=None):
        def fake_post(url, data=None, timeout=None):
            calls.append({"url": url, "data": data, "timeout": timeout})
            if exc:
                raise exc
            return response
        monkeypatch.setattr(requests, "post", fake_post)
        return calls
    return install


def test_success(app, posted):
    calls = posted(FakeResponse({"success": True}))
    with app.app_context():
        assert verify("tok") is True
    assert calls[0]["data"] == {"secret": "test-secret", "response": "tok"}
    assert calls[0]["url"] == app.config["RECAPTCHA_VERIFY_URL"]


def test_rejected_token(app, posted):
    posted(FakeResponse({"success": False, "error-codes": ["invalid-input-response"]}))
    with app.app_context():
        assert verify("tok") is False


def test_network_error_fails_closed(app, posted):
    posted(exc=requests.ConnectionError("down"))
    with app.app_context():
        assert verify("tok") is False


def test_http_error_fails_closed(app, posted):
    posted(FakeResponse({}, status=502))
    with app.app_context():
        assert verify("tok") is False


def test_missing_token_or_secret(app, posted, monkeypatch):
    calls = posted(FakeResponse({"success": True}))
    with app.app_context():
        assert verify("") is False
        monkeypatch.setitem(app.config, "RECAPTCHA_SECRET_KEY", None)
        assert verify("tok") is False
    assert calls == []
