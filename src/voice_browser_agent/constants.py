"""Shared defaults for the agent backend."""

SERVICE_NAME = "Voice Browser Agent"
SERVICE_VERSION = "1.0.0"

# Demo single-user model
DEFAULT_USER_ID = "default-user"
DEFAULT_PROFILE_ID = "default-profile"

DEFAULT_MODEL = "gpt-5"
DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_STEP_DELAY_SECONDS = 1.0
DEFAULT_NAVIGATE_DELAY_SECONDS = 1.0
DEFAULT_REFRESH_DELAY_SECONDS = 0.5

DEFAULT_LOG_LIST_LIMIT = 100
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_AUTOMATION_LOG_LIMIT = 1000

RECENT_EVENTS_LIMIT = 200

# Prompt truncation
ANALYSIS_CONTENT_CHARS = 4000
LOGIN_CONTENT_CHARS = 3000
SUMMARY_CONTENT_CHARS = 2000

WORDPRESS_USER_AGENT = "Voice-AI-Browser-Agent/1.0"
WORDPRESS_BULK_PAUSE_SECONDS = 0.5
