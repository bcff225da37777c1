from sqlalchemy import select

from zelene.extensions import db, mail
from zelene.models import ContactQuery, EmailLog, SupportRequest
from zelene.services.email import absolute_url, send_query_confirmation


def test_absolute_url(app):
    with app.app_context():
        assert absolute_url("/queries-lookup") == "http://example.test/queries-lookup"


def test_query_confirmation_renders_both_parts_and_logs(app):
    with app.test_request_context("/"):
        query = ContactQuery(name="Grace", organization="Navy", email="Grace@Example.com", phone="1",
                             inquiry_type="MEDIA", message="m" * 10)
        db.session.add(query)
        db.session.commit()

        with mail.record_messages() as outbox:
            assert send_query_confirmation(query) is True

        assert len(outbox) == 1
        msg = outbox[0]
        assert msg.recipients == ["Grace@Example.com"]
        assert msg.subject == f"Contact Query Confirmation - Query ID: {query.id}"
        assert query.id in msg.body
        assert "Grace" in msg.body
        assert "http://example.test/queries-lookup" in msg.html

        log = db.session.scalars(select(EmailLog)).one()
        assert log.status == "sent"
        assert log.to_email == "grace@example.com"
        assert log.template == "query_confirmation"
        assert log.query_id == query.id


def test_no_address_means_no_email(app):
    with app.test_request_context("/"):
        req = SupportRequest(category="OTHER", subject="s", description="d" * 10, priority="LOW")
        db.session.add(req)
        db.session.commit()

        with mail.record_messages() as outbox:
            assert send_query_confirmation(req) is False

        assert outbox == []
        assert db.session.scalars(select(EmailLog)).all() == []
