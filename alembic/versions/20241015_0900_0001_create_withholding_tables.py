"""Create withholding tables

Revision ID: 0001_create_withholding_tables
Revises:
Create Date: 2024-10-15 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_withholding_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'employees',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('address', sa.JSON(), nullable=True),
        sa.Column('work_location', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_employees_id', 'employees', ['id'])

    op.create_table(
        'employee_tax_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.String(length=36), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('filing_status', sa.String(length=40), nullable=False),
        sa.Column('federal_allowances', sa.Integer(), nullable=False),
        sa.Column('additional_federal_withholding', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_exempt_federal', sa.Boolean(), nullable=False),
        sa.Column('state_code', sa.String(length=8), nullable=False),
        sa.Column('state_filing_status', sa.String(length=40), nullable=True),
        sa.Column('state_allowances', sa.Integer(), nullable=False),
        sa.Column('additional_state_withholding', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_exempt_state', sa.Boolean(), nullable=False),
        sa.Column('w4_step2_checkbox', sa.Boolean(), nullable=False),
        sa.Column('w4_dependents_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('w4_other_income', sa.Numeric(12, 2), nullable=False),
        sa.Column('w4_deductions', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_employee_tax_profiles_id', 'employee_tax_profiles', ['id'])
    op.create_index(
        'ix_employee_tax_profiles_employee_id', 'employee_tax_profiles', ['employee_id'], unique=True
    )

    op.create_table(
        'federal_tax_brackets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tax_year', sa.Integer(), nullable=False),
        sa.Column('filing_status', sa.String(length=40), nullable=False),
        sa.Column('bracket_min', sa.Numeric(14, 2), nullable=False),
        sa.Column('bracket_max', sa.Numeric(14, 2), nullable=True),
        sa.Column('tax_rate', sa.Numeric(7, 5), nullable=False),
        sa.Column('base_tax', sa.Numeric(14, 2), nullable=False),
        sa.UniqueConstraint(
            'tax_year', 'filing_status', 'bracket_min', name='uq_federal_bracket_year_status_min'
        ),
    )
    op.create_index('ix_federal_tax_brackets_id', 'federal_tax_brackets', ['id'])
    op.create_index(
        'ix_federal_brackets_year_status', 'federal_tax_brackets', ['tax_year', 'filing_status']
    )

    op.create_table(
        'state_tax_brackets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('state_code', sa.String(length=8), nullable=False),
        sa.Column('tax_year', sa.Integer(), nullable=False),
        sa.Column('filing_status', sa.String(length=40), nullable=False),
        sa.Column('bracket_min', sa.Numeric(14, 2), nullable=False),
        sa.Column('bracket_max', sa.Numeric(14, 2), nullable=True),
        sa.Column('tax_rate', sa.Numeric(7, 5), nullable=False),
        sa.Column('base_tax', sa.Numeric(14, 2), nullable=False),
        sa.Column('standard_deduction', sa.Numeric(12, 2), nullable=False),
        sa.Column('personal_exemption', sa.Numeric(12, 2), nullable=False),
        sa.UniqueConstraint(
            'state_code', 'tax_year', 'filing_status', 'bracket_min',
            name='uq_state_bracket_state_year_status_min'
        ),
    )
    op.create_index('ix_state_tax_brackets_id', 'state_tax_brackets', ['id'])
    op.create_index(
        'ix_state_brackets_state_year_status', 'state_tax_brackets',
        ['state_code', 'tax_year', 'filing_status']
    )

    op.create_table(
        'tax_calculation_audit',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.String(length=36), nullable=False),
        sa.Column('calculation_id', sa.String(length=100), nullable=False),
        sa.Column('engine_used', sa.String(length=30), nullable=False),
        sa.Column('gross_pay', sa.Numeric(12, 2), nullable=False),
        sa.Column('pay_period', sa.String(length=20), nullable=False),
        sa.Column('result', sa.JSON(), nullable=False),
        sa.Column('calculated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_tax_calculation_audit_id', 'tax_calculation_audit', ['id'])
    op.create_index('ix_tax_calculation_audit_employee_id', 'tax_calculation_audit', ['employee_id'])
    op.create_index('ix_tax_calculation_audit_calculation_id', 'tax_calculation_audit', ['calculation_id'])
    op.create_index('ix_tax_calculation_audit_calculated_at', 'tax_calculation_audit', ['calculated_at'])
    op.create_index(
        'idx_tax_audit_employee_calculated', 'tax_calculation_audit', ['employee_id', 'calculated_at']
    )

    op.create_table(
        'withholding_job_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('job_type', sa.String(length=60), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('job_data', sa.JSON(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_withholding_job_logs_id', 'withholding_job_logs', ['id'])
    op.create_index('ix_withholding_job_logs_job_type', 'withholding_job_logs', ['job_type'])
    op.create_index('ix_withholding_job_logs_status', 'withholding_job_logs', ['status'])


def downgrade():
    op.drop_table('withholding_job_logs')
    op.drop_table('tax_calculation_audit')
    op.drop_table('state_tax_brackets')
    op.drop_table('federal_tax_brackets')
    op.drop_table('employee_tax_profiles')
    op.drop_table('employees')
