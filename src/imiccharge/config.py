import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_URL = "https://api.firdacar.no:443"

BASE_URL = os.getenv("IMICCHARGE_BASE_URL", DEFAULT_BASE_URL)
TOKEN_DB = os.getenv("IMICCHARGE_TOKEN_DB", "imiccharge.db")
LOG_LEVEL = os.getenv("IMICCHARGE_LOG_LEVEL", "WARNING")

# Seconds; unset keeps aiohttp's default timeout
_request_timeout = os.getenv("IMICCHARGE_REQUEST_TIMEOUT")
REQUEST_TIMEOUT = float(_request_timeout) if _request_timeout else None

FLUENTD_ENDPOINT = os.getenv("IMICCHARGE_FLUENTD_ENDPOINT") or None
FLUENTD_TAG = os.getenv("IMICCHARGE_FLUENTD_TAG", "imiccharge")
