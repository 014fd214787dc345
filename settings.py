# settings.py
import os
from dotenv import load_dotenv

load_dotenv()

# Remote matrimonial API
MATRIMONY_API_BASE_URL = os.getenv("MATRIMONY_API_BASE_URL", "https://app.90skalyanam.com/api").rstrip("/")
MATRIMONY_API_TIMEOUT = float(os.getenv("MATRIMONY_API_TIMEOUT", "15"))

if not MATRIMONY_API_BASE_URL:
    raise RuntimeError("Missing MATRIMONY_API_BASE_URL")

# Where the client goes once the wizard is finished
PROFILE_COMPLETION_ROUTE = os.getenv("PROFILE_COMPLETION_ROUTE", "/(tabs)/index")

# Telemetry
TELEMETRY_DB_PATH = os.getenv("TELEMETRY_DB_PATH", "telemetry.sqlite3")
TELEMETRY_ENABLED = os.getenv("TELEMETRY_ENABLED", "1").strip() == "1"

# App
DEBUG = os.getenv("DEBUG", "0").strip() == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
