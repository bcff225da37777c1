from flask_login import current_user

from zelene.models import ContactQuery, Feedback, SupportRequest, TechnicalIssue
from zelene.schemas.admin_queries import PaginationIn, QueryResponseIn, StatusFilterIn
from zelene.services import admin_queries
from zelene.services.policy import admin_required
from zelene.services.rpc import parse_input, respond

from . import mutations_bp, view_bp

QUERY = ("GET", "POST")


def _page(model):
    return respond(admin_queries.list_page(model, parse_input(PaginationIn)))


def _update(model):
    return respond(admin_queries.update_query(model, parse_input(QueryResponseIn), actor_id=current_user.id))


# ---- adminQueryView ----

@view_bp.route("/getContacts", methods=QUERY)
@admin_required
def get_contacts():
    return _page(ContactQuery)


@view_bp.route("/getFeedback", methods=QUERY)
@admin_required
def get_feedback():
    return _page(Feedback)


@view_bp.route("/getSupportRequests", methods=QUERY)
@admin_required
def get_support_requests():
    return _page(SupportRequest)


@view_bp.route("/getTechnicalIssues", methods=QUERY)
@admin_required
def get_technical_issues():
    return _page(TechnicalIssue)


@view_bp.route("/getQueryCounts", methods=QUERY)
@admin_required
def get_query_counts():
    params = parse_input(StatusFilterIn)
    return respond(admin_queries.query_counts(params.status))


# ---- adminQueryMutations ----

@mutations_bp.post("/updateContactQuery")
@admin_required
def update_contact_query():
    return _update(ContactQuery)


@mutations_bp.post("/updateFeedback")
@admin_required
def update_feedback():
    return _update(Feedback)


@mutations_bp.post("/updateSupportRequest")
@admin_required
def update_support_request():
    return _update(SupportRequest)


@mutations_bp.post("/updateTechnicalIssue")
@admin_required
def update_technical_issue():
    return _update(TechnicalIssue)
