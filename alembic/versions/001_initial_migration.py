"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


staff_role = sa.Enum('ADMIN', 'DOCTOR', 'NURSE', 'RECEPTIONIST', name='staffrole')
gender = sa.Enum('MALE', 'FEMALE', 'OTHER', name='gender')
bed_status = sa.Enum('AVAILABLE', 'OCCUPIED', 'MAINTENANCE', 'BLOCKED', name='bedstatus')
request_status = sa.Enum(
    'PENDING', 'APPROVED', 'AWAITING_DEPOSIT', 'DEPOSIT_PAID', 'CONVERTED', 'REJECTED',
    name='admissionrequeststatus'
)
urgency = sa.Enum('LOW', 'NORMAL', 'HIGH', 'EMERGENCY', name='urgency')
admission_status = sa.Enum('ACTIVE', 'DISCHARGED', name='admissionstatus')
transaction_type = sa.Enum('CHARGE', 'DEPOSIT', 'PAYMENT', 'REFUND', 'ADJUSTMENT', name='transactiontype')
payment_method = sa.Enum('CASH', 'CARD', 'UPI', 'ONLINE', name='paymentmethod')
charge_item_type = sa.Enum(
    'BED', 'MEDICINE', 'LAB', 'PROCEDURE', 'CONSULTATION', 'SERVICE', 'OTHER',
    name='chargeitemtype'
)
payment_status = sa.Enum('PENDING', 'PARTIAL', 'PAID', 'REFUNDED', name='paymentstatus')


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    # Directory
    op.create_table(
        'staff',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('role', staff_role, nullable=False),
        sa.Column('department', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    op.create_table(
        'patients',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('patient_number', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('gender', gender, nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_patients_patient_number', 'patients', ['patient_number'], unique=True)

    # Wards and beds
    op.create_table(
        'wards',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('floor', sa.String(length=50), nullable=True),
        sa.Column('department', sa.String(length=100), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.CheckConstraint('capacity > 0', name='check_ward_capacity')
    )

    op.create_table(
        'bed_types',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('ward_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('daily_rate', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('max_occupancy', sa.Integer(), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['ward_id'], ['wards.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ward_id', 'name', name='uq_bed_type_name_per_ward'),
        sa.CheckConstraint('daily_rate >= 0', name='check_daily_rate')
    )
    op.create_index('ix_bed_types_ward_id', 'bed_types', ['ward_id'], unique=False)

    op.create_table(
        'beds',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('ward_id', sa.String(length=36), nullable=False),
        sa.Column('bed_type_id', sa.String(length=36), nullable=False),
        sa.Column('bed_number', sa.String(length=20), nullable=False),
        sa.Column('status', bed_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['ward_id'], ['wards.id']),
        sa.ForeignKeyConstraint(['bed_type_id'], ['bed_types.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ward_id', 'bed_number', name='uq_bed_number_per_ward')
    )
    op.create_index('ix_beds_ward_id', 'beds', ['ward_id'], unique=False)
    op.create_index('ix_beds_ward_status', 'beds', ['ward_id', 'status'], unique=False)

    # Admission workflow
    op.create_table(
        'admission_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('patient_id', sa.String(length=36), nullable=False),
        sa.Column('doctor_id', sa.String(length=36), nullable=False),
        sa.Column('ward_type', sa.String(length=100), nullable=True),
        sa.Column('bed_type', sa.String(length=100), nullable=True),
        sa.Column('urgency', urgency, nullable=False),
        sa.Column('estimated_stay', sa.Integer(), nullable=True),
        sa.Column('diagnosis', sa.Text(), nullable=True),
        sa.Column('chief_complaint', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', request_status, nullable=False),
        sa.Column('deposit_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('deposit_method', payment_method, nullable=True),
        sa.Column('requested_at', sa.DateTime(), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('processed_by', sa.String(length=36), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('admission_id', sa.String(length=36), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id']),
        sa.ForeignKeyConstraint(['doctor_id'], ['staff.id']),
        sa.ForeignKeyConstraint(['processed_by'], ['staff.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('estimated_stay IS NULL OR estimated_stay > 0', name='check_estimated_stay')
    )
    op.create_index('ix_admission_requests_patient_id', 'admission_requests', ['patient_id'], unique=False)
    op.create_index('ix_admission_requests_doctor_id', 'admission_requests', ['doctor_id'], unique=False)
    op.create_index('ix_admission_requests_status', 'admission_requests', ['status'], unique=False)

    op.create_table(
        'admissions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('patient_id', sa.String(length=36), nullable=False),
        sa.Column('bed_id', sa.String(length=36), nullable=False),
        sa.Column('doctor_id', sa.String(length=36), nullable=False),
        sa.Column('admitted_by', sa.String(length=36), nullable=False),
        sa.Column('admission_request_id', sa.String(length=36), nullable=True),
        sa.Column('admitted_at', sa.DateTime(), nullable=False),
        sa.Column('diagnosis', sa.Text(), nullable=True),
        sa.Column('chief_complaint', sa.Text(), nullable=True),
        sa.Column('estimated_stay', sa.Integer(), nullable=True),
        sa.Column('status', admission_status, nullable=False),
        sa.Column('discharged_at', sa.DateTime(), nullable=True),
        sa.Column('discharge_notes', sa.Text(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id']),
        sa.ForeignKeyConstraint(['bed_id'], ['beds.id']),
        sa.ForeignKeyConstraint(['doctor_id'], ['staff.id']),
        sa.ForeignKeyConstraint(['admitted_by'], ['staff.id']),
        sa.ForeignKeyConstraint(['admission_request_id'], ['admission_requests.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_admissions_patient_id', 'admissions', ['patient_id'], unique=False)
    op.create_index('ix_admissions_bed_id', 'admissions', ['bed_id'], unique=False)
    op.create_index('ix_admissions_status', 'admissions', ['status'], unique=False)

    # Requests and admissions point at each other; SQLite cannot ALTER in constraints
    if op.get_bind().dialect.name != 'sqlite':
        op.create_foreign_key(
            'fk_admission_request_admission', 'admission_requests', 'admissions',
            ['admission_id'], ['id']
        )

    op.create_table(
        'ledger_transactions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('admission_id', sa.String(length=36), nullable=False),
        sa.Column('patient_id', sa.String(length=36), nullable=False),
        sa.Column('type', transaction_type, nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('payment_method', payment_method, nullable=True),
        sa.Column('item_type', charge_item_type, nullable=True),
        sa.Column('item_name', sa.String(length=200), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('tax_rate', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('charge_day', sa.Integer(), nullable=True),
        sa.Column('service_date', sa.Date(), nullable=True),
        sa.Column('processed_by', sa.String(length=36), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['admission_id'], ['admissions.id']),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id']),
        sa.ForeignKeyConstraint(['processed_by'], ['staff.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount >= 0', name='check_ledger_amount'),
        sa.UniqueConstraint('admission_id', 'charge_day', name='uq_bed_charge_day_per_admission')
    )
    op.create_index('ix_ledger_transactions_admission_id', 'ledger_transactions', ['admission_id'], unique=False)
    op.create_index('ix_ledger_transactions_reference', 'ledger_transactions', ['reference'], unique=False)

    # Final bills
    op.create_table(
        'bills',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('bill_number', sa.String(length=50), nullable=False),
        sa.Column('patient_id', sa.String(length=36), nullable=False),
        sa.Column('admission_id', sa.String(length=36), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('pending_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_status', payment_status, nullable=True),
        sa.Column('generated_date', sa.DateTime(), nullable=True),
        sa.Column('generated_by', sa.String(length=36), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id']),
        sa.ForeignKeyConstraint(['admission_id'], ['admissions.id']),
        sa.ForeignKeyConstraint(['generated_by'], ['staff.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('bill_number'),
        sa.UniqueConstraint('admission_id')
    )
    op.create_index('ix_bills_patient_id', 'bills', ['patient_id'], unique=False)

    op.create_table(
        'bill_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('bill_id', sa.String(length=36), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=True),
        sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.ForeignKeyConstraint(['bill_id'], ['bills.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_bill_items_bill_id', 'bill_items', ['bill_id'], unique=False)

    # Hospital settings
    op.create_table(
        'hospital_settings',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('business_start', sa.String(length=5), nullable=True),
        sa.Column('business_end', sa.String(length=5), nullable=True),
        sa.Column('lunch_start', sa.String(length=5), nullable=True),
        sa.Column('lunch_end', sa.String(length=5), nullable=True),
        sa.Column('token_prefix', sa.String(length=10), nullable=False),
        sa.Column('max_tokens_per_session', sa.Integer(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'session_templates',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('settings_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('short_code', sa.String(length=10), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('end_time', sa.String(length=5), nullable=False),
        sa.Column('max_tokens', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['settings_id'], ['hospital_settings.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_session_templates_settings_id', 'session_templates', ['settings_id'], unique=False)


def downgrade() -> None:
    # Drop all tables in reverse order of creation
    op.drop_table('session_templates')
    op.drop_table('hospital_settings')
    op.drop_table('bill_items')
    op.drop_table('bills')
    op.drop_table('ledger_transactions')
    if op.get_bind().dialect.name != 'sqlite':
        op.drop_constraint('fk_admission_request_admission', 'admission_requests', type_='foreignkey')
    op.drop_table('admissions')
    op.drop_table('admission_requests')
    op.drop_table('beds')
    op.drop_table('bed_types')
    op.drop_table('wards')
    op.drop_table('patients')
    op.drop_table('staff')

    # Drop enums
    bind = op.get_bind()
    for enum_type in (
        payment_status, charge_item_type, payment_method, transaction_type,
        admission_status, urgency, request_status, bed_status, gender, staff_role,
    ):
        enum_type.drop(bind, checkfirst=True)
