"""001_baseline

Baseline migration for the GoWater dispatch schema: routes and orders.
Matches app/models (route.py, order.py).

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ------------------------------------------------------------------
    # Enum types
    # ------------------------------------------------------------------
    op.execute(
        "CREATE TYPE route_status AS ENUM "
        "('pending', 'in_progress', 'completed')"
    )
    op.execute(
        "CREATE TYPE order_status AS ENUM "
        "('pending', 'in_transit', 'delivered', 'cancelled')"
    )
    op.execute(
        "CREATE TYPE payment_method AS ENUM ('cash', 'check', 'credit_card')"
    )

    # ------------------------------------------------------------------
    # Tables (dependency order)
    # ------------------------------------------------------------------

    # --- routes ---
    op.execute("""
        CREATE TABLE routes (
            id SERIAL PRIMARY KEY,
            name VARCHAR(100) NOT NULL,
            date TIMESTAMP WITH TIME ZONE NOT NULL,
            version INTEGER NOT NULL DEFAULT 1,
            driver_id INTEGER NOT NULL,
            assistant_id INTEGER,
            truck_id INTEGER NOT NULL,
            status route_status NOT NULL DEFAULT 'pending',
            delivery_sequence JSON,
            total_distance_km DECIMAL(10,2),
            estimated_duration_minutes INTEGER,
            current_location VARCHAR(64),
            start_time TIMESTAMP WITH TIME ZONE,
            end_time TIMESTAMP WITH TIME ZONE,
            last_update TIMESTAMP WITH TIME ZONE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
    """)
    op.execute("CREATE INDEX ix_routes_date ON routes (date)")

    # --- orders ---
    op.execute("""
        CREATE TABLE orders (
            id SERIAL PRIMARY KEY,
            customer_id INTEGER NOT NULL,
            total DECIMAL(10,2) NOT NULL DEFAULT 0,
            payment_method payment_method,
            date TIMESTAMP WITH TIME ZONE NOT NULL,
            status order_status NOT NULL DEFAULT 'pending',
            delivery_coordinates VARCHAR(64),
            route_id INTEGER,
            estimated_delivery_time TIMESTAMP WITH TIME ZONE,
            delivery_sequence INTEGER,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT fk_orders_route_id_routes
                FOREIGN KEY (route_id) REFERENCES routes(id)
        )
    """)
    op.execute("CREATE INDEX ix_orders_customer_id ON orders (customer_id)")
    op.execute("CREATE INDEX ix_orders_route_id ON orders (route_id)")

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ language 'plpgsql'
    """)

    for table in ("routes", "orders"):
        op.execute(
            f"CREATE TRIGGER update_{table}_updated_at "
            f"BEFORE UPDATE ON {table} "
            f"FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        )


def downgrade() -> None:
    # Drop triggers
    for table in ("orders", "routes"):
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")

    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # ------------------------------------------------------------------
    # Drop tables (reverse dependency order)
    # ------------------------------------------------------------------
    op.execute("DROP TABLE IF EXISTS orders CASCADE")
    op.execute("DROP TABLE IF EXISTS routes CASCADE")

    # ------------------------------------------------------------------
    # Drop enum types
    # ------------------------------------------------------------------
    op.execute("DROP TYPE IF EXISTS payment_method")
    op.execute("DROP TYPE IF EXISTS order_status")
    op.execute("DROP TYPE IF EXISTS route_status")
