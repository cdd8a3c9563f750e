import os

from dotenv import load_dotenv

BASE_DIR = os.path.dirname(__file__)
load_dotenv(os.path.join(BASE_DIR, ".env"))

API_BASE_URL = os.getenv("WORDNEST_API_URL", "http://localhost:5000/api").rstrip("/")
LOCAL_STORE_DIR = os.path.expanduser(
    os.getenv("WORDNEST_STORE_DIR", os.path.join("~", ".wordnest"))
)

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
RETRY_MAX_ATTEMPTS = int(os.getenv("RETRY_MAX_ATTEMPTS", "3"))
RETRY_BASE_DELAY = float(os.getenv("RETRY_BASE_DELAY", "0.25"))
RETRY_MAX_DELAY = float(os.getenv("RETRY_MAX_DELAY", "2.0"))

TTS_BASE_URL = os.getenv("TTS_BASE_URL", "https://proxy.junookyo.workers.dev/")
TTS_LANGUAGE = os.getenv("TTS_LANGUAGE", "en-US")

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
