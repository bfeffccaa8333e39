from .base import *  # noqa
from .base import BASE_DIR
from .base import REST_FRAMEWORK as BASE_REST_FRAMEWORK

DEBUG = False

# Use a local SQLite database for reliability and speed in tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "shopcart-tests",
    }
}

# Static manifest is not built in tests
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

SHOPCART_PRODUCT_MODEL = "catalog.Product"
SHOPCART_CART_ITEM_TTL = 60
SHOPCART_STOCK_SERVICE = "inventory.services.StockAvailabilityService"
SHOPCART_CART_MODIFIERS = []
SHOPCART_TENANT_DATABASES = ["default"]

# Slightly relax throttling for tests to reduce flakiness
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    **BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {}),
    "user": "1000/min",
    "anon": "1000/min",
    "cart": "1000/min",
    "cart_write": "1000/min",
}
