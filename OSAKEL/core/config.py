# file: OSAKEL/core/config.py
import os

# ==============================
# Firebase
# ==============================
# Project id is optional: service-account keys carry their own.
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Path to a service-account JSON file, or the raw JSON string itself.
CREDENTIAL_SOURCE = os.getenv("OSAKEL_SERVICE_ACCOUNT") or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

FIREBASE_APP_NAME = os.getenv("OSAKEL_FIREBASE_APP_NAME", "osakel-admin")

# ==============================
# Logging
# ==============================
LOG_LEVEL = os.getenv("OSAKEL_LOG_LEVEL", "INFO")
CLOUD_LOGGING = os.getenv("OSAKEL_CLOUD_LOGGING", "0").lower() in ("1", "true", "yes")

# ==============================
# Batching
# ==============================
FIRESTORE_BATCH_LIMIT = 500  # hard per-commit write limit
MIGRATION_BATCH_SIZE = int(os.getenv("OSAKEL_MIGRATION_BATCH_SIZE", "400"))
LINK_BATCH_SIZE = 500
DELETE_PAGE_SIZE = 500
BATCH_PAUSE_SECONDS = float(os.getenv("OSAKEL_BATCH_PAUSE_SECONDS", "0.1"))

# ==============================
# Collections
# ==============================
CATEGORIES = "categories"
DRINKS = "drinks"
SHOPS = "shops"
DRINK_SHOP_LINKS = "drink_shop_links"

DUPLICATE_SUFFIX = "_duplicated"
