import pytest
from flask import Flask

from zelene.errors import ProcedureError
from zelene.services import policy


class DummyUser:
    def __init__(self, role="MEMBER", auth=True, active=True):
        self.id, self.role, self.is_authenticated, self.is_active = 1, role, auth, active


def make_app():
    app = Flask(__name__); app.config.update(SECRET_KEY="x", TESTING=True)
    return app


@pytest.fixture()
def as_user(monkeypatch):
    def _set(user):
        monkeypatch.setattr(policy, "current_user", user)
    return _set


def test_login_required_rejects_anonymous(as_user):
    @policy.login_required
    def v(): return "ok"
    as_user(DummyUser(auth=False))
    with make_app().test_request_context("/rpc/x"):
        with pytest.raises(ProcedureError) as exc:
            v()
    assert exc.value.code == "UNAUTHORIZED"


def test_login_required_rejects_disabled_account(as_user):
    @policy.login_required
    def v(): return "ok"
    as_user(DummyUser(active=False))
    with make_app().test_request_context("/rpc/x"):
        with pytest.raises(ProcedureError) as exc:
            v()
    assert exc.value.code == "UNAUTHORIZED"


def test_admin_required_forbids_member(as_user):
    @policy.admin_required
    def v(): return "ok"
    as_user(DummyUser(role="MEMBER"))
    with make_app().test_request_context("/rpc/x"):
        with pytest.raises(ProcedureError) as exc:
            v()
    assert exc.value.code == "FORBIDDEN" and exc.value.status == 403


@pytest.mark.parametrize("role", ["ADMIN", "TENANT_ADMIN"])
def test_admin_required_allows_admin_roles(as_user, role):
    @policy.admin_required
    def v(): return "ok"
    as_user(DummyUser(role=role))
    with make_app().test_request_context("/rpc/x"):
        assert v() == "ok"


def test_tenant_admin_only(as_user):
    @policy.tenant_admin_required
    def v(): return "ok"
    as_user(DummyUser(role="ADMIN"))
    with make_app().test_request_context("/rpc/x"):
        with pytest.raises(ProcedureError):
            v()
    assert v.allowed_roles == frozenset({"TENANT_ADMIN"})


def test_role_required_needs_roles():
    with pytest.raises(ValueError):
        policy.role_required()


def test_is_admin():
    assert policy.is_admin(DummyUser(role="TENANT_ADMIN"))
    assert not policy.is_admin(DummyUser(role="MEMBER"))
    assert not policy.is_admin(DummyUser(role="ADMIN", auth=False))
