import uuid
from datetime import datetime
from staffing_api.extensions import db

# pending uploads made through a consultant invite link live in their own table
INVITE_SLUG = "invite_via_link"


def _uuid():
    return str(uuid.uuid4())


class TempUploadDocument(db.Model):
    """File uploaded ahead of the form that references it."""
    __tablename__ = "temp_upload_documents"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    document_name = db.Column(db.String(255), nullable=False)
    document_path = db.Column(db.String(512), nullable=False)   # relative to DOCUMENTS_ROOT
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class InvitedEmployeeDocument(db.Model):
    """Upload made by a consultant through an invite link (slug 'invite_via_link')."""
    __tablename__ = "invited_employee_documents"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    document_name = db.Column(db.String(255), nullable=False)
    document_path = db.Column(db.String(512), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
