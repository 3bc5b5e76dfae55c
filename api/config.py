# Cookie session
SESSION_COOKIE = "quiz_session"
SESSION_TTL = 3600      # 1 hour
CLEANUP_INTERVAL = 300  # expired-session sweep, seconds

# Server
DEFAULT_TIMEOUT = 15.0
