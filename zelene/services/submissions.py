"""
Public query submission: captcha check, attachment upload, insert with
status NEW, then a best-effort confirmation email.
"""

from flask import current_app

from zelene.errors import ProcedureError
from zelene.extensions import attachments, db
from zelene.models import ContactQuery, Feedback, SupportRequest, TechnicalIssue
from zelene.models.query import STATUS_NEW
from zelene.schemas.queries import (
    ContactQueryIn,
    FeedbackIn,
    SupportRequestIn,
    TechnicalIssueIn,
)
from zelene.services import captcha
from zelene.services.email import send_query_confirmation

# Never persisted; status is always forced to NEW
_CLIENT_ONLY = {"status", "captcha_token"}


def _check_captcha(token):
    if token and not captcha.verify(token):
        raise ProcedureError("BAD_REQUEST", "Captcha verification failed")


def _insert(model, fields: dict, *, failure_message: str):
    row = model(**fields)
    row.status = STATUS_NEW
    try:
        db.session.add(row)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("query insert failed", extra={"event": "query_submit_failed", "kind": model.kind})
        raise ProcedureError("INTERNAL_SERVER_ERROR", failure_message)
    return row


def _confirm(row) -> bool:
    try:
        return send_query_confirmation(row)
    except Exception:
        # The row is committed already; a broken notification must not fail the submission
        db.session.rollback()
        current_app.logger.exception("confirmation email failed", extra={"event": "query_confirmation_failed", "query_id": row.id})
        return False


def _finish(row) -> dict:
    email_sent = _confirm(row)
    current_app.logger.info(
        "query submitted",
        extra={"event": "query_submitted", "kind": row.kind, "query_id": row.id, "email_sent": email_sent},
    )
    return {"success": True, "queryId": row.id, "emailSent": email_sent}


def submit_contact(payload: ContactQueryIn) -> dict:
    _check_captcha(payload.captcha_token)
    row = _insert(ContactQuery, payload.model_dump(exclude=_CLIENT_ONLY), failure_message="Failed to submit contact form")
    return _finish(row)


def submit_feedback(payload: FeedbackIn) -> dict:
    _check_captcha(payload.captcha_token)
    row = _insert(Feedback, payload.model_dump(exclude=_CLIENT_ONLY), failure_message="Failed to submit feedback")
    return _finish(row)


def submit_support_request(payload: SupportRequestIn) -> dict:
    _check_captcha(payload.captcha_token)
    row = _insert(SupportRequest, payload.model_dump(exclude=_CLIENT_ONLY), failure_message="Failed to submit support request")
    return _finish(row)


def upload_attachments(files) -> list[str]:
    """Decode every file first, then upload sequentially. Returns storage keys."""
    decoded = []
    for f in files:
        try:
            decoded.append((f, f.decode()))
        except ValueError as e:
            raise ProcedureError("BAD_REQUEST", str(e))

    keys = []
    for f, data in decoded:
        try:
            keys.append(attachments.save(filename=f.filename, content_type=f.content_type, data=data))
        except Exception:
            current_app.logger.exception(
                "attachment upload failed",
                extra={"event": "attachment_upload_failed", "content_type": f.content_type, "uploaded": len(keys)},
            )
            attachments.discard(keys)
            raise ProcedureError("INTERNAL_SERVER_ERROR", "Failed to upload attachments")
    return keys


def submit_technical_issue(payload: TechnicalIssueIn) -> dict:
    _check_captcha(payload.captcha_token)
    keys = upload_attachments(payload.attachments)
    fields = payload.model_dump(exclude=_CLIENT_ONLY | {"attachments"})
    fields["attachments"] = keys
    try:
        row = _insert(TechnicalIssue, fields, failure_message="Failed to submit technical issue")
    except ProcedureError:
        attachments.discard(keys)
        raise
    return _finish(row)
