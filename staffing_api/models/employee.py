import uuid
from datetime import datetime
from staffing_api.extensions import db

class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    reference_id = db.Column(db.String(32), nullable=False, unique=True)   # e.g. CON-0042
    display_name = db.Column(db.String(160), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=True)
    status = db.Column(db.String(16), default="active", nullable=False)    # active/inactive

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True)
