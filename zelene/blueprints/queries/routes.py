from flask import current_app

from zelene.extensions import limiter
from zelene.schemas.queries import ContactQueryIn, FeedbackIn, QueryIdIn, SupportRequestIn, TechnicalIssueIn
from zelene.services import admin_queries, submissions
from zelene.services.rpc import parse_input, respond

from . import bp, lookup_bp


def _submit_limit():
    return current_app.config["QUERY_SUBMIT_RATE_LIMIT"]


@bp.post("/submitContact")
@limiter.limit(_submit_limit)
def submit_contact():
    return respond(submissions.submit_contact(parse_input(ContactQueryIn)))


@bp.post("/submitFeedback")
@limiter.limit(_submit_limit)
def submit_feedback():
    return respond(submissions.submit_feedback(parse_input(FeedbackIn)))


@bp.post("/submitSupportRequest")
@limiter.limit(_submit_limit)
def submit_support_request():
    return respond(submissions.submit_support_request(parse_input(SupportRequestIn)))


@bp.post("/submitTechnicalIssue")
@limiter.limit(_submit_limit)
def submit_technical_issue():
    return respond(submissions.submit_technical_issue(parse_input(TechnicalIssueIn)))


@lookup_bp.route("/getQueryById", methods=("GET", "POST"))
@limiter.limit("30 per minute")
def get_query_by_id():
    params = parse_input(QueryIdIn)
    return respond(admin_queries.lookup(params.id))
