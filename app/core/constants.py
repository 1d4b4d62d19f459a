"""Application-wide constants and configuration values.

Centralizes magic numbers and configuration to avoid duplication
and make changes easier.
"""

# ============== TIME CONSTANTS (seconds) ==============
SECONDS_PER_DAY = 86400

# Client store TTL for auth session keys
SESSION_TTL_SECONDS = 7 * SECONDS_PER_DAY

# ============== CLIENT STORE KEYS ==============
AUTH_TOKEN_KEY = "auth_token"
AUTH_USER_KEY = "auth_user"
TOKEN_EXPIRES_KEY = "token_expires_in"

# ============== CART ==============
MIN_QUANTITY = 1
MAX_QUANTITY = 99
NOTES_MAX_LENGTH = 200

# ============== PAYMENT PROOF ==============
MAX_PROOF_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB

# Static payment instructions shown on the checkout confirmation screen
BANK_ACCOUNT = "1234567890"
BANK_NAME = "Bank Tabungan Negara (BTN)"
ACCOUNT_NAME = "CRSD BTN"
QRIS_PAYLOAD = (
    "00020126360014ID.CO.QRISDDATA5204500753033606107" "12345678906304F500"
)

# ============== PAGINATION ==============
ORDERS_PER_PAGE = 10
PAYMENTS_PER_PAGE = 100
RESTAURANTS_PER_PAGE = 10

# ============== MESSAGE LIMITS ==============
MAX_INLINE_BUTTONS = 100  # Telegram limit per message
MAX_BUTTON_TITLE_LENGTH = 25
