"""create flood snapshots table

Revision ID: 5e1f0c7a9b21
Revises:
Create Date: 2026-10-18 09:12:44.118204+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5e1f0c7a9b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'flood_snapshots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('captured_at', sa.DateTime(timezone=True), nullable=False, comment='When the cycle completed'),
        sa.Column('waze_count', sa.Integer(), nullable=False, comment='Flood alerts in the live feed'),
        sa.Column('affected_areas', sa.Integer(), nullable=False, comment='Risk zones with status above normal'),
        sa.Column('alerts_in_areas', sa.Integer(), nullable=False, comment='Flood alerts inside an affected zone'),
        sa.Column('avg_rain', sa.Float(), nullable=False, comment='Mean 1h rain across stations in mm'),
        sa.Column('max_rain', sa.Float(), nullable=False, comment='Largest 1h rain in mm'),
        sa.Column('active_stations', sa.Integer(), nullable=True, comment='Stations reporting rain in the last hour'),
        sa.Column('severity', sa.Integer(), nullable=False, comment='0 normal, 1 attention, 2 alert, 3 critical'),
        sa.Column('raw', sa.JSON(), nullable=True, comment='Raw upstream payloads'),
        sa.CheckConstraint('severity >= 0 AND severity <= 3', name='ck_snapshot_severity_range'),
        sa.CheckConstraint('waze_count >= 0', name='ck_snapshot_waze_count_positive'),
        sa.CheckConstraint('affected_areas >= 0', name='ck_snapshot_affected_areas_positive'),
        sa.CheckConstraint('alerts_in_areas >= 0', name='ck_snapshot_alerts_in_areas_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_flood_snapshots_id'), 'flood_snapshots', ['id'], unique=False)
    op.create_index(op.f('ix_flood_snapshots_captured_at'), 'flood_snapshots', ['captured_at'], unique=False)
    op.create_index('idx_snapshot_captured_severity', 'flood_snapshots', ['captured_at', 'severity'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_snapshot_captured_severity', table_name='flood_snapshots')
    op.drop_index(op.f('ix_flood_snapshots_captured_at'), table_name='flood_snapshots')
    op.drop_index(op.f('ix_flood_snapshots_id'), table_name='flood_snapshots')
    op.drop_table('flood_snapshots')
