from datetime import datetime
from sqlalchemy.dialects.postgresql import JSONB
from staffing_api.extensions import db

# JSONB on Postgres, plain JSON elsewhere (sqlite in tests)
_JSON = db.JSON().with_variant(JSONB(), "postgresql")


class EmployeeActivityLog(db.Model):
    __tablename__ = "employee_activity_logs"

    REFERRABLE_BANK_DETAILS = 11

    ACTION_CREATE = 1
    ACTION_UPDATE = 2
    ACTION_DELETE = 3

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(
        db.String(36), db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    referrable_type = db.Column(db.SmallInteger, nullable=False)
    referrable_type_id = db.Column(db.Integer, nullable=True)
    action_type = db.Column(db.SmallInteger, nullable=False)
    change_log = db.Column(_JSON, nullable=True)
    created_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
