"""Create users, loans, payments and notifications

Revision ID: 3f9c2a71b0d4
Revises:
Create Date: 2026-02-16 04:50:47.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c2a71b0d4'
down_revision = None
branch_labels = None
depends_on = None

LOAN_STATUS = sa.Enum('pending', 'partial', 'paid', name='loan_status')
PAYMENT_METHOD = sa.Enum('cash', 'e_wallet', name='payment_method')
PAYMENT_STATUS = sa.Enum('pending', 'accepted', 'rejected', name='payment_status')
NOTIFICATION_TYPE = sa.Enum(
    'reminder', 'auto_reminder', 'payment_received', 'payment_verified',
    'payment_rejected', 'loan_created', 'due_date_set', 'due_date_changed',
    'due_date_removed',
    name='notification_type'
)
REMINDER_BUCKET = sa.Enum('due_today', 'due_tomorrow', 'due_soon', 'overdue', name='reminder_bucket')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('fcm_token', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    op.create_table(
        'loans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('lender_id', sa.Integer(), nullable=False),
        sa.Column('borrower_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('status', LOAN_STATUS, nullable=False),
        sa.Column('remaining_amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('lender_id <> borrower_id', name='ck_loans_no_self_loan'),
        sa.CheckConstraint('amount > 0', name='ck_loans_positive_amount'),
        sa.CheckConstraint(
            'remaining_amount >= 0 AND remaining_amount <= amount',
            name='ck_loans_remaining_bounds'
        ),
        sa.ForeignKeyConstraint(['lender_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['borrower_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('loans', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_loans_lender_id'), ['lender_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_loans_borrower_id'), ['borrower_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_loans_due_date'), ['due_date'], unique=False)

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('loan_id', sa.Integer(), nullable=False),
        sa.Column('payer_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('payment_method', PAYMENT_METHOD, nullable=False),
        sa.Column('screenshot_url', sa.String(length=500), nullable=True),
        sa.Column('status', PAYMENT_STATUS, nullable=False),
        sa.Column('rejected_reason', sa.String(length=500), nullable=True),
        sa.Column('verified_at', sa.DateTime(), nullable=True),
        sa.Column('verified_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('amount > 0', name='ck_payments_positive_amount'),
        sa.CheckConstraint(
            "status <> 'rejected' OR rejected_reason IS NOT NULL",
            name='ck_payments_rejection_reason'
        ),
        sa.ForeignKeyConstraint(['loan_id'], ['loans.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['payer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['verified_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('payments', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_payments_loan_id'), ['loan_id'], unique=False)

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.Integer(), nullable=True),
        sa.Column('loan_id', sa.Integer(), nullable=True),
        sa.Column('type', NOTIFICATION_TYPE, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('reminder_type', REMINDER_BUCKET, nullable=True),
        sa.Column('reminder_date', sa.Date(), nullable=True),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "(type = 'auto_reminder' AND reminder_type IS NOT NULL AND reminder_date IS NOT NULL)"
            " OR (type <> 'auto_reminder' AND reminder_type IS NULL AND reminder_date IS NULL)",
            name='ck_notifications_reminder_variant'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['loan_id'], ['loans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'user_id', 'loan_id', 'reminder_type', 'reminder_date',
            name='uq_notifications_daily_reminder'
        )
    )
    with op.batch_alter_table('notifications', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_notifications_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_notifications_created_at'), ['created_at'], unique=False)


def downgrade():
    with op.batch_alter_table('notifications', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_notifications_created_at'))
        batch_op.drop_index(batch_op.f('ix_notifications_user_id'))
    op.drop_table('notifications')

    with op.batch_alter_table('payments', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_payments_loan_id'))
    op.drop_table('payments')

    with op.batch_alter_table('loans', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_loans_due_date'))
        batch_op.drop_index(batch_op.f('ix_loans_borrower_id'))
        batch_op.drop_index(batch_op.f('ix_loans_lender_id'))
    op.drop_table('loans')

    op.drop_table('users')

    for enum in (REMINDER_BUCKET, NOTIFICATION_TYPE, PAYMENT_STATUS, PAYMENT_METHOD, LOAN_STATUS):
        enum.drop(op.get_bind(), checkfirst=True)
