"""employees, bank account details, pending documents, activity log

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2026-10-12 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'employees',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('reference_id', sa.String(32), nullable=False, unique=True),
        sa.Column('display_name', sa.String(160), nullable=False),
        sa.Column('email', sa.String(255), nullable=True, unique=True),
        sa.Column('status', sa.String(16), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'employee_bank_account_details',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.String(36), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('bank_name', sa.String(100), nullable=False),
        sa.Column('account_number', sa.String(12), nullable=False),
        sa.Column('routing_number', sa.String(9), nullable=False),
        sa.Column('account_type', sa.String(20), nullable=False),
        sa.Column('deposit_type', sa.SmallInteger(), nullable=False, server_default='1'),
        sa.Column('deposit_value', sa.String(20), nullable=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('void_cheque_document_url', sa.String(512), nullable=True),
        sa.Column('void_cheque_document_path', sa.String(512), nullable=True),
        sa.Column('void_cheque_document_name', sa.String(255), nullable=True),
        sa.Column('deposit_form_document_url', sa.String(512), nullable=True),
        sa.Column('deposit_form_document_path', sa.String(512), nullable=True),
        sa.Column('deposit_form_document_name', sa.String(255), nullable=True),
        sa.Column('created_by', sa.String(64), nullable=True),
        sa.Column('updated_by', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_employee_bank_account_details_employee_id', 'employee_bank_account_details', ['employee_id'])
    op.create_index('ix_empbank_employee_live', 'employee_bank_account_details', ['employee_id', 'deleted_at'])

    for table in ('temp_upload_documents', 'invited_employee_documents'):
        op.create_table(
            table,
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('document_name', sa.String(255), nullable=False),
            sa.Column('document_path', sa.String(512), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    op.create_table(
        'employee_activity_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.String(36), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('referrable_type', sa.SmallInteger(), nullable=False),
        sa.Column('referrable_type_id', sa.Integer(), nullable=True),
        sa.Column('action_type', sa.SmallInteger(), nullable=False),
        sa.Column('change_log', sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'), nullable=True),
        sa.Column('created_by', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_employee_activity_logs_employee_id', 'employee_activity_logs', ['employee_id'])


def downgrade() -> None:
    op.drop_index('ix_employee_activity_logs_employee_id', table_name='employee_activity_logs')
    op.drop_table('employee_activity_logs')
    op.drop_table('invited_employee_documents')
    op.drop_table('temp_upload_documents')
    op.drop_index('ix_empbank_employee_live', table_name='employee_bank_account_details')
    op.drop_index('ix_employee_bank_account_details_employee_id', table_name='employee_bank_account_details')
    op.drop_table('employee_bank_account_details')
    op.drop_table('employees')
