"""Request/response plumbing shared by the /rpc blueprints."""

import json
from typing import TypeVar

from flask import jsonify, request

from zelene.errors import ProcedureError
from zelene.schemas.base import CamelModel

M = TypeVar("M", bound=CamelModel)


def raw_input() -> dict:
    """Procedure input: `?input=<json>` on GET, JSON body otherwise."""
    if request.method == "GET":
        raw = request.args.get("input")
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            raise ProcedureError("BAD_REQUEST", "input must be JSON")
    else:
        data = request.get_json(silent=True)
        if data is None:
            return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ProcedureError("BAD_REQUEST", "input must be a JSON object")
    return data


def parse_input(schema: type[M]) -> M:
    return schema.model_validate(raw_input())


def respond(payload, status: int = 200):
    if isinstance(payload, CamelModel):
        payload = payload.dump()
    return jsonify(payload), status
