"""initial schema: tickets and redeemable codes

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    op.create_table('tickets',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('buyer_name', sa.String(length=255), nullable=False),
        sa.Column('buyer_email', sa.String(length=255), nullable=True),
        sa.Column('event_name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='valid'),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.CheckConstraint('quantity > 0', name='ck_tickets_quantity_positive'),
        sa.CheckConstraint('price > 0', name='ck_tickets_price_positive'),
    )
    op.create_index('ix_tickets_event_name', 'tickets', ['event_name'])
    op.create_index('ix_tickets_created_at', 'tickets', ['created_at'])
    op.create_table('redeemable_codes',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('ticket_id', sa.String(length=36), sa.ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('redeemed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('uses_remaining', sa.Integer(), nullable=False),
        sa.CheckConstraint('uses_remaining >= 0', name='ck_redeemable_codes_uses_non_negative'),
    )
    op.create_index('ix_redeemable_codes_ticket_id', 'redeemable_codes', ['ticket_id'], unique=True)

def downgrade() -> None:
    op.drop_index('ix_redeemable_codes_ticket_id', table_name='redeemable_codes')
    op.drop_table('redeemable_codes')
    op.drop_index('ix_tickets_created_at', table_name='tickets')
    op.drop_index('ix_tickets_event_name', table_name='tickets')
    op.drop_table('tickets')
