from datetime import datetime
from enum import IntEnum
from staffing_api.extensions import db


class DepositType(IntEnum):
    FULL = 1          # full net pay to one account
    PARTIAL = 2       # fixed currency amount
    PERCENTAGE = 3    # percentage of net pay
    REMAINDER = 4     # whatever is left

    @property
    def label(self):
        return _DEPOSIT_LABELS[self]


_DEPOSIT_LABELS = {
    DepositType.FULL: "Full Net",
    DepositType.PARTIAL: "Partial $",
    DepositType.PERCENTAGE: "Partial %",
    DepositType.REMAINDER: "Remainder",
}


class EmployeeBankAccountDetails(db.Model):
    __tablename__ = "employee_bank_account_details"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(
        db.String(36), db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    bank_name = db.Column(db.String(100), nullable=False)
    account_number = db.Column(db.String(12), nullable=False)
    routing_number = db.Column(db.String(9), nullable=False)
    account_type = db.Column(db.String(20), nullable=False)   # checking/savings (lookup id as text)
    deposit_type = db.Column(db.SmallInteger, nullable=False, default=int(DepositType.FULL))
    deposit_value = db.Column(db.String(20), nullable=True)   # amount for PARTIAL, percent for PERCENTAGE
    description = db.Column(db.String(255), nullable=True)

    void_cheque_document_url = db.Column(db.String(512), nullable=True)
    void_cheque_document_path = db.Column(db.String(512), nullable=True)
    void_cheque_document_name = db.Column(db.String(255), nullable=True)
    deposit_form_document_url = db.Column(db.String(512), nullable=True)
    deposit_form_document_path = db.Column(db.String(512), nullable=True)
    deposit_form_document_name = db.Column(db.String(255), nullable=True)

    created_by = db.Column(db.String(64), nullable=True)
    updated_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=datetime.utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.Index("ix_empbank_employee_live", "employee_id", "deleted_at"),
    )
