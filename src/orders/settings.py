"""Runtime knobs for the orders context, read from the environment."""

import os

DEFAULT_ESTIMATED_DELIVERY = os.getenv("DEFAULT_ESTIMATED_DELIVERY", "15-20 min")
DEFAULT_ITEM_CATEGORY = os.getenv("DEFAULT_ITEM_CATEGORY", "General")
DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "India")

# Free-text reasons (cancellation, refund, dispute resolution)
MIN_REASON_LENGTH = int(os.getenv("MIN_REASON_LENGTH", "10"))

ORDER_NUMBER_MAX_ATTEMPTS = int(os.getenv("ORDER_NUMBER_MAX_ATTEMPTS", "5"))

IDENTITY_ADAPTER = os.getenv("IDENTITY_ADAPTER", "directory")

# Bearer tokens issued by the directory identity adapter are signed with this
TOKEN_SECRET = os.getenv("TOKEN_SECRET", "orders-development-secret")

MAX_CANCELLATION_REASON_LENGTH = int(os.getenv("MAX_CANCELLATION_REASON_LENGTH", "200"))
