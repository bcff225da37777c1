from zelene.extensions import db
from zelene.models import User


def test_bootstrap_tenant_admin_only_once(app):
    runner = app.test_cli_runner()
    args = ["bootstrap", "tenant-admin", "--username", "root", "--email", "Root@Example.com", "--password", "secret12"]

    result = runner.invoke(args=args)
    assert result.exit_code == 0
    assert "Bootstrap complete" in result.output

    again = runner.invoke(args=[*args[:2], "--username", "root2", "--email", "r2@example.com", "--password", "secret12"])
    assert again.exit_code != 0
    assert "already exists" in again.output

    with app.app_context():
        user = db.session.query(User).filter_by(username="root").one()
        assert user.role == "TENANT_ADMIN"
        assert user.email == "root@example.com"


def test_users_create_and_promote(app):
    runner = app.test_cli_runner()

    created = runner.invoke(args=["users", "create", "--username", "worker", "--email", "w@example.com", "--password", "secret12"])
    assert created.exit_code == 0
    assert "role=MEMBER" in created.output

    dup = runner.invoke(args=["users", "create", "--username", "worker", "--email", "other@example.com", "--password", "secret12"])
    assert dup.exit_code != 0

    promoted = runner.invoke(args=["users", "promote", "--username", "worker", "--role", "ADMIN"])
    assert "MEMBER -> ADMIN" in promoted.output

    missing = runner.invoke(args=["users", "promote", "--username", "ghost", "--role", "ADMIN"])
    assert missing.exit_code != 0
