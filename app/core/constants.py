"""Application constants."""

# Program / exercise limits
PROGRAM_TITLE_MAX_LENGTH = 200
EXERCISE_NAME_MAX_LENGTH = 255

# Dashboard
DASHBOARD_RECENT_LIMIT = 5

# Session keys (server-side session store)
SESSION_USER_ID = "user_id"
SESSION_RETURN_TO = "return_to"
SESSION_CHALLENGE = "webauthn_challenge"
SESSION_PENDING_EMAIL = "pending_email"
SESSION_PENDING_WEBAUTHN_ID = "pending_webauthn_id"

# Generic message for every authentication failure (never reveal the cause)
AUTH_FAILED_MESSAGE = "Authentication failed. Please try again."
SIGN_IN_REQUIRED_MESSAGE = "Please sign in to continue"
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
