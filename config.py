import os

from dotenv import load_dotenv

load_dotenv()

# Base directory
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Paths
STATIC_DIR = os.path.join(BASE_DIR, "static")
LOG_FILE = os.getenv("LOG_FILE", os.path.join(BASE_DIR, "launch.log"))

# Server
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))

# Supabase (content + profile store). Unset -> in-memory sample content.
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

# Session timer
TICK_INTERVAL_SECONDS = float(os.getenv("TICK_INTERVAL_SECONDS", "1.0"))
WARNING_THRESHOLD_SECONDS = 300     # clock turns red under 5 minutes
