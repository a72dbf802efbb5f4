"""
Configuration settings for the Hostel Portal
"""
import logging.config
import os
from typing import Dict, List

# Property Settings
PROPERTY_NAME = os.getenv("PROPERTY_NAME", "Maruti PG")
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "MarutiPG")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "MarutiPG@#$SS")
ADMIN_UPI_ID = os.getenv("ADMIN_UPI_ID", "9328235517@ibl")
CURRENCY_CODE = "INR"
CURRENCY_SYMBOL = "₹"

# Credential generation (stored in plaintext, see DESIGN.md)
PASSWORD_SUFFIX = os.getenv("PASSWORD_SUFFIX", "MarutiPG")
PASSWORD_SYMBOLS: List[str] = ["@", "#", "$"]
PASSWORD_PREFIX_LENGTH = 4

DEFAULT_PHOTO_URL = os.getenv("DEFAULT_PHOTO_URL", "https://picsum.photos/120/120")

# Notification gateway (WhatsApp / SMS HTTP API)
NOTIFY_API_URL = os.getenv("NOTIFY_API_URL", "")
NOTIFY_API_KEY = os.getenv("NOTIFY_API_KEY", "")
NOTIFY_COUNTRY_CODE = os.getenv("NOTIFY_COUNTRY_CODE", "91")
NOTIFY_TIMEOUT = int(os.getenv("NOTIFY_TIMEOUT", "10"))

# Media upload host
MEDIA_UPLOAD_URL = os.getenv(
    "MEDIA_UPLOAD_URL", "https://api.cloudinary.com/v1_1/maruti-pg-hub/image/upload"
)
MEDIA_UPLOAD_PRESET = os.getenv("MEDIA_UPLOAD_PRESET", "maruti_unsigned")
MEDIA_API_KEY = os.getenv("MEDIA_API_KEY", "")
MEDIA_TIMEOUT = int(os.getenv("MEDIA_TIMEOUT", "30"))

# Payment status
STATUS_PAID = "PAID"
STATUS_UNPAID = "UNPAID"
STATUS_PENDING = "PENDING"

# Payment request status
REQUEST_PENDING = "PENDING"
REQUEST_APPROVED = "APPROVED"
REQUEST_REJECTED = "REJECTED"

# Room types
ROOM_AC = "AC"
ROOM_NON_AC = "NON_AC"
ROOM_TYPES = [ROOM_AC, ROOM_NON_AC]

# Expense categories
EXPENSE_CATEGORIES = ["VEGETABLES", "MILK", "GROCERIES", "PETROL", "OTHERS"]

# Announcement types
ANNOUNCEMENT_TYPES = ["INFO", "WARNING", "ALERT"]

# Filter options
FILTER_ALL = "ALL"

# Reminder defaults
REMINDER_DAYS_BEFORE = 3

# Database Settings
USE_DATABASE = os.getenv("USE_DATABASE", "true").lower() in ("1", "true", "yes")
DATABASE_PATH = os.getenv("DATABASE_PATH", "data/hostel.duckdb")

# Collections persisted by the durable store
COLLECTIONS = [
    "hostels",
    "residents",
    "expenses",
    "payment_requests",
    "announcements",
    "menu",
    "reminder_config",
]

# Date Format
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
DISPLAY_DATE_FORMAT = "%d %b %Y"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING: Dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
}


def configure_logging(config: Dict = None):
    """Apply the logging dict-config"""
    logging.config.dictConfig(config or LOGGING)
