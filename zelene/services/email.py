from typing import Any, Dict, Optional
from urllib.parse import urljoin

import time

from flask import current_app, render_template
from flask_mail import Message

from zelene.extensions import db, mail
from zelene.models import EmailLog

QUERY_CONFIRMATION_TEMPLATE = "query_confirmation"


def absolute_url(path: str) -> str:
    base = current_app.config["APP_BASE_URL"].rstrip("/") + "/"
    return urljoin(base, path.lstrip("/"))


def send_email(
    to_email: str,
    subject: str,
    template: str,
    context: Optional[Dict[str, Any]] = None,
    query_id: Optional[str] = None,
) -> bool:
    """
    template: basename under templates/email/ without extension.
    Renders HTML and plaintext, records the attempt in email_logs and
    returns whether the transport accepted the message. SMTP errors are
    logged and recorded, never raised.
    """
    context = context or {}
    msg = Message(recipients=[to_email], subject=subject)
    msg.body = render_template(f"email/{template}.txt", **context)
    msg.html = render_template(f"email/{template}.html", **context)

    elog = EmailLog(
        query_id=query_id,
        to_email=to_email.lower(),
        template=template,
        subject=subject,
        status="queued",
        meta={},
    )
    db.session.add(elog)
    db.session.commit()

    start = time.perf_counter()
    try:
        mail.send(msg)
    except Exception as ex:
        latency_ms = int((time.perf_counter() - start) * 1000)
        elog.status = "failed"
        elog.meta = {"error": type(ex).__name__}
        db.session.commit()
        current_app.logger.warning(
            "mail_send failed",
            extra={
                "event": "mail_send",
                "template": template,
                "query_id": query_id,
                "outcome": "smtp_error",
                "latency_ms": latency_ms,
                "smtp_error": str(ex),
            },
        )
        return False

    latency_ms = int((time.perf_counter() - start) * 1000)
    elog.status = "sent"
    db.session.commit()
    current_app.logger.info(
        "mail_send sent",
        extra={
            "event": "mail_send",
            "template": template,
            "query_id": query_id,
            "outcome": "sent",
            "latency_ms": latency_ms,
        },
    )
    return True


def send_query_confirmation(query) -> bool:
    """Confirmation with the new query id; skipped when the submitter left no address."""
    to_email = query.recipient
    if not to_email:
        return False
    ctx = {
        "product_name": current_app.config.get("SITE_NAME", "Zelene Platform"),
        "query_id": query.id,
        "query_type": query.label,
        "user_name": query.recipient_name,
        "support_email": current_app.config.get("SUPPORT_EMAIL"),
        "lookup_url": absolute_url("queries-lookup"),
    }
    return send_email(
        to_email=to_email,
        subject=f"{query.label} Confirmation - Query ID: {query.id}",
        template=QUERY_CONFIRMATION_TEMPLATE,
        context=ctx,
        query_id=query.id,
    )
