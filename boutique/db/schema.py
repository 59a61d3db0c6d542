# boutique/db/schema.py

from sqlalchemy import (
    DDL, JSON, MetaData, Table, Column, Integer, String, Float,
    Numeric, Date, DateTime, ForeignKey, CheckConstraint, Text,
    UniqueConstraint, event, func,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String, nullable=False, unique=True),
    Column("api_token", String, nullable=False, unique=True),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

customers = Table(
    "customers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("full_name", String, nullable=False),
    Column("phone", String, nullable=False),
    Column("email", String),
    Column("address", Text),
    # core body measurements, in the boutique's preferred unit
    Column("bust", Float),
    Column("under_bust", Float),
    Column("waist", Float),
    Column("hip", Float),
    Column("shoulder_width", Float),
    Column("arm_length", Float),
    Column("upper_arm", Float),
    Column("neck_round", Float),
    Column("front_neck_depth", Float),
    Column("back_neck_depth", Float),
    Column("full_height", Float),
    Column("notes", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column(
        "updated_at", DateTime, nullable=False,
        server_default=func.now(), onupdate=func.now(),
    ),
    CheckConstraint("length(full_name) > 0", name="ck_customers_full_name_nonblank"),
    CheckConstraint("length(phone) > 0", name="ck_customers_phone_nonblank"),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_number", String, nullable=False, unique=True),
    Column(
        "customer_id", Integer,
        ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True,
    ),
    Column("delivery_date", Date, nullable=False, index=True),
    Column("status", String, nullable=False, server_default="received"),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("advance_paid", Numeric(12, 2), nullable=False, server_default="0"),
    Column("notes", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column(
        "updated_at", DateTime, nullable=False,
        server_default=func.now(), onupdate=func.now(),
    ),
    CheckConstraint("length(order_number) > 0", name="ck_orders_order_number_nonblank"),
    CheckConstraint(
        "status IN ('received', 'in_progress', 'trial', 'ready', 'delivered')",
        name="ck_orders_status",
    ),
    CheckConstraint("total_amount >= 0", name="ck_orders_total_nonneg"),
    CheckConstraint("advance_paid >= 0", name="ck_orders_advance_nonneg"),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "order_id", Integer,
        ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True,
    ),
    Column("garment_type", String, nullable=False),
    Column("description", Text),
    Column("measurements", JSON),
    Column("quantity", Integer, nullable=False, server_default="1"),
    Column("price", Numeric(12, 2), nullable=False),
    Column("notes", Text),
    CheckConstraint("quantity >= 1", name="ck_order_items_quantity_pos"),
    CheckConstraint("price > 0", name="ck_order_items_price_pos"),
)

design_images = Table(
    "design_images",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "order_item_id", Integer,
        ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False, index=True,
    ),
    Column("storage_path", Text, nullable=False),
    Column("caption", Text),
    Column("uploaded_at", DateTime, nullable=False, server_default=func.now()),
    UniqueConstraint("order_item_id", "storage_path", name="uq_design_images_item_path"),
)

boutique_settings = Table(
    "boutique_settings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("boutique_name", String, nullable=False),
    Column("phone", String),
    Column("address", Text),
    Column("measurement_unit", String, nullable=False, server_default="inches"),
    Column("reminder_days", Integer, nullable=False, server_default="2"),
    Column("pdf_footer_text", Text),
    Column("order_prefix", String, nullable=False, server_default="ALR"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column(
        "updated_at", DateTime, nullable=False,
        server_default=func.now(), onupdate=func.now(),
    ),
    CheckConstraint("id = 1", name="ck_boutique_settings_singleton"),
    CheckConstraint(
        "measurement_unit IN ('inches', 'cm')", name="ck_boutique_settings_unit"
    ),
)

push_subscriptions = Table(
    "push_subscriptions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id", Integer,
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    ),
    Column("endpoint", Text, nullable=False),
    Column("keys_p256dh", Text, nullable=False),
    Column("keys_auth", Text, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    UniqueConstraint("user_id", "endpoint", name="uq_push_subscriptions_user_endpoint"),
)

# Global order-number sequence. One row, advanced with a single
# UPDATE ... RETURNING inside the order-creation transaction.
order_counters = Table(
    "order_counters",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("value", Integer, nullable=False),
    CheckConstraint("value >= 0", name="ck_order_counters_value_nonneg"),
)

ORDER_COUNTER_ID = 1

event.listen(
    order_counters,
    "after_create",
    DDL(f"INSERT INTO order_counters (id, value) VALUES ({ORDER_COUNTER_ID}, 0)"),
)
