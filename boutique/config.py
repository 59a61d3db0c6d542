# boutique/config.py
"""
Process-level configuration, read from the environment (and an optional .env).

The boutique's own Settings row lives in the database and is loaded per
request; see boutique.api.deps.get_boutique_settings.
"""

import os

from dotenv import load_dotenv

load_dotenv()

DB_URL = os.getenv("DATABASE_URL", "sqlite:///db.sqlite")  # file in project root

TIMEZONE = os.getenv("BOUTIQUE_TIMEZONE", "UTC")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# File storage (S3 / MinIO)
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "design-references")
STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL")
STORAGE_ACCESS_KEY = os.getenv("STORAGE_ACCESS_KEY")
STORAGE_SECRET_KEY = os.getenv("STORAGE_SECRET_KEY")
STORAGE_REGION = os.getenv("STORAGE_REGION", "us-east-1")
STORAGE_PUBLIC_URL = os.getenv("STORAGE_PUBLIC_URL")

# Web push
VAPID_PUBLIC_KEY = os.getenv("VAPID_PUBLIC_KEY", "")
VAPID_PRIVATE_KEY = os.getenv("VAPID_PRIVATE_KEY", "")
VAPID_SUBJECT = os.getenv("VAPID_SUBJECT", "mailto:admin@allure-boutique.com")

# Defaults used when the boutique has not saved its settings yet
DEFAULT_BOUTIQUE_NAME = "Allure Boutique"
DEFAULT_ORDER_PREFIX = "ALR"
DEFAULT_REMINDER_DAYS = 2
DEFAULT_MEASUREMENT_UNIT = "inches"
DEFAULT_PDF_FOOTER = "Thank you for choosing us!"

UPCOMING_WINDOW_DAYS = 7
RECENT_ORDERS_LIMIT = 10
CUSTOMERS_PAGE_SIZE = 20
