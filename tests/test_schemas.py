import base64

import pytest
from pydantic import ValidationError

from zelene.schemas.queries import ContactQueryIn, FeedbackIn, FileUpload, TechnicalIssueIn


def _feedback(**over):
    data = {
        "category": "FEATURES",
        "satisfaction": 3,
        "usability": 3,
        "improvements": "Faster dashboards.",
        "recommendation": False,
    }
    data.update(over)
    return data


@pytest.mark.parametrize("score", [0, 5])
def test_feedback_scores_accept_bounds(score):
    fb = FeedbackIn.model_validate(_feedback(satisfaction=score, usability=score))
    assert fb.satisfaction == score
    assert fb.features == []


@pytest.mark.parametrize("score", [-1, 6])
def test_feedback_scores_reject_out_of_range(score):
    with pytest.raises(ValidationError):
        FeedbackIn.model_validate(_feedback(satisfaction=score))


def test_blank_optional_email_becomes_none():
    assert FeedbackIn.model_validate(_feedback(email="")).email is None


def test_contact_message_minimum_length():
    base = {
        "name": "N", "organization": "O", "email": "n@example.com",
        "phone": "1", "inquiryType": "SALES",
    }
    with pytest.raises(ValidationError):
        ContactQueryIn.model_validate({**base, "message": "too short"})
    assert ContactQueryIn.model_validate({**base, "message": "long enough now"}).inquiry_type == "SALES"


def test_contact_requires_valid_email():
    with pytest.raises(ValidationError):
        ContactQueryIn.model_validate({
            "name": "N", "organization": "O", "email": "not-an-email",
            "phone": "1", "inquiryType": "SALES", "message": "long enough now",
        })


def test_file_upload_decodes_data_url_prefix():
    encoded = base64.b64encode(b"%PDF-1.4").decode()
    f = FileUpload.model_validate({
        "filename": "r.pdf", "contentType": "APPLICATION/PDF", "size": 8,
        "base64Data": f"data:application/pdf;base64,{encoded}",
    })
    assert f.content_type == "application/pdf"
    assert f.decode() == b"%PDF-1.4"


def test_technical_issue_blank_device_id_and_null_attachments():
    issue = TechnicalIssueIn.model_validate({
        "deviceId": "", "issueType": "SECURITY", "severity": "CRITICAL", "title": "t",
        "description": "0123456789", "stepsToReproduce": "0123456789",
        "expectedBehavior": "0123456789", "attachments": None,
    })
    assert issue.device_id is None
    assert issue.attachments == []
