import os
import sys

from dotenv import load_dotenv

from enums.currency import Currency
from enums.order_source import OrderSource
from enums.payment_method import PaymentMethod
from enums.runtime_environment import RuntimeEnvironment
from enums.storage_backend import StorageBackend

# Load .env but don't override existing environment variables
# This allows tests to set values before import
load_dotenv(".env", override=False)


def _fail(name: str, reason, valid_values: list[str] | None = None):
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    if valid_values:
        print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}\n", file=sys.stderr)
    sys.exit(1)


try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", "DEV"))
except ValueError as e:
    _fail("RUNTIME_ENVIRONMENT", e, [env.value for env in RuntimeEnvironment])

STORE_LANGUAGE = os.environ.get("STORE_LANGUAGE", "vi")
if STORE_LANGUAGE not in ("vi", "en"):
    _fail("STORE_LANGUAGE", f"unsupported language '{STORE_LANGUAGE}'", ["vi", "en"])

try:
    CURRENCY = Currency(os.environ.get("CURRENCY", "VND"))
except ValueError as e:
    _fail("CURRENCY", e, [c.value for c in Currency])

# Cart persistence
try:
    CART_STORAGE_BACKEND = StorageBackend(os.environ.get("CART_STORAGE_BACKEND", "memory"))
except ValueError as e:
    _fail("CART_STORAGE_BACKEND", e, [b.value for b in StorageBackend])
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "cart")

# Local database (cart snapshots) and catalog database (products, customers, profiles)
DB_NAME = os.environ.get("DB_NAME", "storefront.db")
DB_URL = os.environ.get("DB_URL", f"sqlite+aiosqlite:///data/{DB_NAME}")
CATALOG_DB_URL = os.environ.get("CATALOG_DB_URL", DB_URL)

REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD")

# Lookups
SEARCH_RESULT_LIMIT = int(os.environ.get("SEARCH_RESULT_LIMIT", "10"))

# User feedback
NOTIFICATION_TTL_SECONDS = float(os.environ.get("NOTIFICATION_TTL_SECONDS", "3"))

# Point of sale defaults
try:
    DEFAULT_POS_PAYMENT_METHOD = PaymentMethod(os.environ.get("DEFAULT_POS_PAYMENT_METHOD", "cash"))
    DEFAULT_ORDER_SOURCE = OrderSource(os.environ.get("DEFAULT_ORDER_SOURCE", "pos"))
except ValueError as e:
    _fail("DEFAULT_POS_PAYMENT_METHOD/DEFAULT_ORDER_SOURCE", e,
          [m.value for m in PaymentMethod] + [s.value for s in OrderSource])
DEFAULT_BRANCH_ID = os.environ.get("DEFAULT_BRANCH_ID", "default_branch_id")
DEFAULT_PRICE_POLICY = os.environ.get("DEFAULT_PRICE_POLICY", "retail_price")
GUEST_CUSTOMER_NAME = os.environ.get("GUEST_CUSTOMER_NAME", "Khách mua tại cửa hàng")
GUEST_PLACEHOLDER = "N/A"
GUEST_PHONE_PLACEHOLDER = os.environ.get("GUEST_PHONE_PLACEHOLDER", "0000000000")

# Order placement
PLACE_ORDER_FUNCTION_URL = os.environ.get("PLACE_ORDER_FUNCTION_URL")
BACKEND_ANON_KEY = os.environ.get("BACKEND_ANON_KEY")
ORDER_PLACEMENT_TIMEOUT_SECONDS = float(os.environ.get("ORDER_PLACEMENT_TIMEOUT_SECONDS", "15"))
ORDER_PROCEDURE_NAME = os.environ.get("ORDER_PROCEDURE_NAME", "create_order_with_customer")

# Logging Configuration
_default_retention = {
    RuntimeEnvironment.DEV: 3,
    RuntimeEnvironment.TEST: 1,
    RuntimeEnvironment.PROD: 14,
}
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", str(_default_retention[RUNTIME_ENVIRONMENT])))
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"
LOG_DIR = os.environ.get("LOG_DIR", "logs")
