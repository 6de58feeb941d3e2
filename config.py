import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Product catalog collaborator (None = log-only catalog)
    CATALOG_SERVICE_URL = data.get("CATALOG_SERVICE_URL", None)
    CATALOG_TIMEOUT_SECONDS = data.get("CATALOG_TIMEOUT_SECONDS", 10.0)

    # What to do with money left over after every open receivable is settled:
    # "report" (return it to the caller), "credit" (add as store credit),
    # "reject" (refuse payments larger than the total due)
    UNAPPLIED_PAYMENT_POLICY = data.get("UNAPPLIED_PAYMENT_POLICY", "report")

    DEFAULT_WARRANTY_DAYS = data.get("DEFAULT_WARRANTY_DAYS", 90)

    # Ledger Reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily

    # Create missing tables on API startup (disable when the schema is migrated externally)
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
