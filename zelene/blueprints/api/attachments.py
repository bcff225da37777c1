import mimetypes

from flask import send_file

from zelene.errors import ProcedureError
from zelene.extensions import attachments
from zelene.services.policy import admin_required
from zelene.services.storage import StorageError

from . import bp


@bp.get("/attachments/<path:key>")
@admin_required
def attachment_download(key: str):
    """Serve a stored attachment (local backend; S3 hands out presigned URLs instead)."""
    store = attachments.backend
    try:
        if not store.exists(key):
            raise ProcedureError("NOT_FOUND", "Attachment not found")
        fh = store.open(key)
    except StorageError:
        raise ProcedureError("NOT_FOUND", "Attachment not found")
    mimetype = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return send_file(fh, mimetype=mimetype, download_name=key.rsplit("/", 1)[-1])
