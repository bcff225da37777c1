from flask import current_app
from sqlalchemy import text

from zelene.extensions import db, limiter

from . import bp


@bp.get("/healthz")
@limiter.exempt
def healthz():
    try:
        db.session.execute(text("SELECT 1"))
    except Exception:
        current_app.logger.exception("healthcheck database ping failed", extra={"event": "healthz_db_failed"})
        return {"status": "degraded", "database": "unavailable"}, 503
    return {"status": "ok"}, 200
