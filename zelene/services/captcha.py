from typing import Optional

import requests
from flask import current_app


def verify(token: Optional[str]) -> bool:
    """
    Check a reCAPTCHA response token with the verify endpoint.
    Network or decoding failures count as a failed challenge.
    """
    if not token:
        return False
    cfg = current_app.config
    secret = cfg.get("RECAPTCHA_SECRET_KEY")
    if not secret:
        current_app.logger.warning("RECAPTCHA_SECRET_KEY missing; rejecting captcha token")
        return False
    try:
        resp = requests.post(
            cfg.get("RECAPTCHA_VERIFY_URL"),
            data={"secret": secret, "response": token},
            timeout=cfg.get("RECAPTCHA_TIMEOUT", 5),
        )
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError):
        current_app.logger.exception("captcha verification failed")
        return False

    ok = bool(payload.get("success"))
    if not ok:
        current_app.logger.info(
            "captcha_rejected",
            extra={"event": "captcha_rejected", "error_codes": payload.get("error-codes", [])},
        )
    return ok
