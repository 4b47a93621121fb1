# shopfront/constants.py
# Checkout conversation states
WAITING_PAYMENT_METHOD, WAITING_PAYMENT_PROOF = range(2)

# user_data keys
SESSION_KEY = "session"
CART_KEY = "cart"
CATALOG_KEY = "catalog"
CHECKOUT_KEY = "checkout"

# bot_data keys
HTTP_SESSION_KEY = "http_session"
DASHBOARDS_KEY = "dashboards"
