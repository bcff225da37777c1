import json

from flask import jsonify, request
from pydantic import ValidationError

STATUS_BY_CODE = {
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "TOO_MANY_REQUESTS": 429,
    "INTERNAL_SERVER_ERROR": 500,
}


class ProcedureError(Exception):
    """Error raised by RPC procedures; rendered as {"error": {"code", "message"}}."""

    def __init__(self, code: str, message: str | None = None):
        if code not in STATUS_BY_CODE:
            raise ValueError(f"Unknown error code: {code}")
        super().__init__(message or code)
        self.code = code
        self.message = message or code.replace("_", " ").capitalize()

    @property
    def status(self) -> int:
        return STATUS_BY_CODE[self.code]

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


def _wants_json() -> bool:
    return (
        request.path.startswith(("/rpc/", "/api/", "/forms/"))
        or "application/json" in (request.headers.get("Accept") or "").lower()
        or request.is_json
    )


def _error(code: str, message: str, **extra):
    payload = {"error": {"code": code, "message": message, **extra}}
    return jsonify(payload), STATUS_BY_CODE[code]


def register_error_handlers(app):
    @app.errorhandler(ProcedureError)
    def handle_procedure_error(e: ProcedureError):
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        issues = json.loads(e.json(include_url=False, include_input=False))
        return _error("BAD_REQUEST", "Invalid input", issues=issues)

    @app.errorhandler(404)
    def not_found(e):
        if _wants_json():
            return _error("NOT_FOUND", "Not found")
        return ("Not Found", 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        if _wants_json():
            return _error("BAD_REQUEST", "Method not allowed")[0], 405
        return ("Method Not Allowed", 405)

    @app.errorhandler(500)
    def server_error(e):
        if _wants_json():
            return _error("INTERNAL_SERVER_ERROR", "Internal server error")
        return ("Internal Server Error", 500)

    # CSRF error handler (clean 400 instead of generic 500)
    from flask_wtf.csrf import CSRFError

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        if _wants_json():
            return _error("BAD_REQUEST", f"CSRF validation failed: {e.description}")
        return (f"CSRF validation failed: {e.description}", 400)

    # 429 Too Many Requests: JSON body with Retry-After
    @app.errorhandler(429)
    def too_many_requests(e):
        retry_after = getattr(e, "retry_after", None)
        headers = {}
        if retry_after is not None:
            headers["Retry-After"] = str(int(retry_after))
        payload = {"error": {"code": "TOO_MANY_REQUESTS", "message": "Rate limit exceeded"}}
        if retry_after is not None:
            payload["error"]["retryAfter"] = int(retry_after)
        return (payload, 429, headers)
