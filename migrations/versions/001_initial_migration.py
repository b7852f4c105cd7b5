"""Initial migration

Revision ID: 001
Revises:
Create Date: 2025-01-06 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('id_card_number', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=True, default='worker'),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('position', sa.String(length=100), nullable=True),
        sa.Column('day_rate', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True, default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_id_card_number'), 'users', ['id_card_number'], unique=True)

    # Create attendance_records table, one row per worker and calendar day
    op.create_table('attendance_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('check_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('check_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hours_worked', sa.Float(), nullable=True, default=0),
        sa.Column('overtime', sa.Float(), nullable=True, default=0),
        sa.Column('status', sa.String(length=20), nullable=False, default='present'),
        sa.Column('auto_marked', sa.Boolean(), nullable=True, default=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uix_attendance_user_date')
    )
    op.create_index(op.f('ix_attendance_records_id'), 'attendance_records', ['id'], unique=False)
    op.create_index(op.f('ix_attendance_records_user_id'), 'attendance_records', ['user_id'], unique=False)

    # Create monthly_salaries table, one row per worker, month name and year
    op.create_table('monthly_salaries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.String(length=20), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('day_rate', sa.Float(), nullable=True, default=0),
        sa.Column('present_days', sa.Integer(), nullable=True, default=0),
        sa.Column('absent_days', sa.Integer(), nullable=True, default=0),
        sa.Column('total_working_days', sa.Integer(), nullable=True, default=0),
        sa.Column('earned_amount', sa.Float(), nullable=True, default=0),
        sa.Column('missed_amount', sa.Float(), nullable=True, default=0),
        sa.Column('bonuses', sa.Float(), nullable=True, default=0),
        sa.Column('total_amount', sa.Float(), nullable=True, default=0),
        sa.Column('is_paid', sa.Boolean(), nullable=True, default=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'month', 'year', name='uix_salary_user_month_year')
    )
    op.create_index(op.f('ix_monthly_salaries_id'), 'monthly_salaries', ['id'], unique=False)
    op.create_index(op.f('ix_monthly_salaries_user_id'), 'monthly_salaries', ['user_id'], unique=False)

    # Create receipts table (append-only)
    op.create_table('receipts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('receipt_type', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False, default=0),
        sa.Column('day_rate', sa.Float(), nullable=True, default=0),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_receipts_id'), 'receipts', ['id'], unique=False)
    op.create_index('ix_receipts_user_date', 'receipts', ['user_id', 'date'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_receipts_user_date', table_name='receipts')
    op.drop_index(op.f('ix_receipts_id'), table_name='receipts')
    op.drop_table('receipts')
    op.drop_index(op.f('ix_monthly_salaries_user_id'), table_name='monthly_salaries')
    op.drop_index(op.f('ix_monthly_salaries_id'), table_name='monthly_salaries')
    op.drop_table('monthly_salaries')
    op.drop_index(op.f('ix_attendance_records_user_id'), table_name='attendance_records')
    op.drop_index(op.f('ix_attendance_records_id'), table_name='attendance_records')
    op.drop_table('attendance_records')
    op.drop_index(op.f('ix_users_id_card_number'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
