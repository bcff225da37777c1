from sqlalchemy import case, func, select

from flask import current_app

from zelene.errors import ProcedureError
from zelene.extensions import attachments, db
from zelene.models import QUERY_MODELS, ContactQuery, Feedback, SupportRequest, TechnicalIssue
from zelene.models.query import ISSUE_SEVERITIES, SUPPORT_PRIORITIES
from zelene.schemas.admin_queries import OUT_SCHEMAS, PaginationIn, QueryResponseIn
from zelene.services.lifecycle import ensure_transition
from zelene.services.metrics import feedback_metrics
from zelene.utils.helpers import total_pages


def _rank(column, ordered_values):
    """Position of the value in ordered_values (lowest first), for desc ordering by weight."""
    return case({v: i for i, v in enumerate(ordered_values)}, value=column, else_=-1)


def _ordering(model):
    if model is SupportRequest:
        return (_rank(SupportRequest.priority, SUPPORT_PRIORITIES).desc(), model.created_at.desc(), model.id)
    if model is TechnicalIssue:
        return (_rank(TechnicalIssue.severity, ISSUE_SEVERITIES).desc(), model.created_at.desc(), model.id)
    return (model.created_at.desc(), model.id)


def _filtered(stmt, model, status):
    if status:
        stmt = stmt.where(model.status == status)
    return stmt


def count_rows(model, status=None) -> int:
    stmt = _filtered(select(func.count()).select_from(model), model, status)
    return db.session.execute(stmt).scalar_one()


def serialize(row) -> dict:
    data = OUT_SCHEMAS[row.kind].model_validate(row).dump()
    if row.kind == TechnicalIssue.kind:
        data["attachments"] = [attachments.url(key) for key in (row.attachments or [])]
    return data


def list_page(model, params: PaginationIn) -> dict:
    stmt = _filtered(select(model), model, params.status).order_by(*_ordering(model))
    stmt = stmt.offset((params.page - 1) * params.limit).limit(params.limit)
    rows = db.session.execute(stmt).scalars().all()
    result = {
        "items": [serialize(r) for r in rows],
        "totalPages": total_pages(count_rows(model, params.status), params.limit),
        "currentPage": params.page,
    }
    if model is Feedback:
        result["metrics"] = feedback_metrics(rows)
    return result


def query_counts(status=None) -> dict:
    return {
        "contacts": count_rows(ContactQuery, status),
        "feedback": count_rows(Feedback, status),
        "supportRequests": count_rows(SupportRequest, status),
        "technicalIssues": count_rows(TechnicalIssue, status),
    }


def update_query(model, payload: QueryResponseIn, *, actor_id=None) -> dict:
    row = db.session.get(model, payload.id)
    if row is None:
        raise ProcedureError("NOT_FOUND", f"{model.label} not found")

    previous = row.status
    ensure_transition(previous, payload.status)

    row.status = payload.status
    row.response = payload.response
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("query update failed", extra={"event": "query_update_failed", "query_id": row.id})
        raise ProcedureError("INTERNAL_SERVER_ERROR", f"Failed to update {model.label.lower()}")

    current_app.logger.info(
        "query status updated",
        extra={
            "event": "query_status_updated",
            "kind": model.kind,
            "query_id": row.id,
            "from_status": previous,
            "to_status": row.status,
            "actor_id": actor_id,
        },
    )
    return serialize(row)


def lookup(query_id: str):
    """First hit across the four query tables, in a fixed order."""
    for model in QUERY_MODELS:
        row = db.session.get(model, query_id)
        if row is not None:
            return {"type": model.kind, "data": OUT_SCHEMAS[model.kind].model_validate(row).dump()}
    return None
