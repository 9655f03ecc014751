"""Create ledger tables

Revision ID: 4b1e0c2f9a7d
Revises: 
Create Date: 2026-10-19 10:12:47.318204

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4b1e0c2f9a7d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('vehicles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('brand', sa.String(length=50), nullable=True),
        sa.Column('capacity_kwh', sa.Float(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('suppliers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=2), nullable=False),
        sa.Column('standard_cost', sa.Float(), nullable=False),
        sa.Column('kind', sa.Enum('home', 'external', 'solar', name='supplier_kind'), nullable=False),
        sa.Column('is_favorite', sa.Boolean(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_suppliers_name', 'suppliers', ['name'], unique=True)

    op.create_table('settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gasoline_price', sa.Float(), nullable=False),
        sa.Column('gasoline_consumption', sa.Float(), nullable=False),
        sa.Column('diesel_price', sa.Float(), nullable=False),
        sa.Column('diesel_consumption', sa.Float(), nullable=False),
        sa.Column('home_electricity_price', sa.Float(), nullable=False),
        sa.Column('solar_electricity_price', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('preferences',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.String(length=500), nullable=True),
        sa.Column('setting_type', sa.String(length=50), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key')
    )

    op.create_table('charges',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vehicle_id', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.Integer(), nullable=True),
        sa.Column('supplier_name', sa.String(length=100), nullable=True),
        sa.Column('supplier_type', sa.String(length=2), nullable=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('total_km', sa.Float(), nullable=False),
        sa.Column('battery_start', sa.Float(), nullable=True),
        sa.Column('battery_end', sa.Float(), nullable=True),
        sa.Column('kwh_added', sa.Float(), nullable=True),
        sa.Column('cost', sa.Float(), nullable=True),
        sa.Column('standard_cost', sa.Float(), nullable=True),
        sa.Column('cost_difference', sa.Float(), nullable=True),
        sa.Column('km_since_last', sa.Float(), nullable=True),
        sa.Column('consumption', sa.Float(), nullable=True),
        sa.Column('status', sa.Enum('in_progress', 'completed', name='charge_status', native_enum=False),
                  nullable=False),
        sa.Column('saved_gasoline_price', sa.Float(), nullable=True),
        sa.Column('saved_diesel_price', sa.Float(), nullable=True),
        sa.Column('saved_gasoline_consumption', sa.Float(), nullable=True),
        sa.Column('saved_diesel_consumption', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['supplier_id'], ['suppliers.id'], ),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_charges_vehicle_id', 'charges', ['vehicle_id'], unique=False)
    op.create_index('ix_charges_date', 'charges', ['date'], unique=False)
    # One open session per vehicle
    op.create_index('uq_charges_open_session_per_vehicle', 'charges', ['vehicle_id'], unique=True,
                    sqlite_where=sa.text("status = 'in_progress'"),
                    postgresql_where=sa.text("status = 'in_progress'"))


def downgrade():
    op.drop_index('uq_charges_open_session_per_vehicle', table_name='charges')
    op.drop_index('ix_charges_date', table_name='charges')
    op.drop_index('ix_charges_vehicle_id', table_name='charges')
    op.drop_table('charges')
    op.drop_table('preferences')
    op.drop_table('settings')
    op.drop_index('ix_suppliers_name', table_name='suppliers')
    op.drop_table('suppliers')
    op.drop_table('vehicles')
