import logging
import os

# ---------- Wire ----------
RECV_BUFFER_SIZE = 8192
LINE_END = "\r\n"
HEADER_TERMINATOR = "\r\n\r\n"

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# The service only ever sets this cookie.
SESSION_COOKIE_NAME = "connect.sid"

# Sent as text/plain under a JSON content type when throttled.
RATE_LIMIT_MESSAGE = "Too many requests, please try again later."

# ---------- Endpoints ----------
API_ROOT = "/api/v1/tema"
REGISTER_PATH = f"{API_ROOT}/auth/register"
LOGIN_PATH = f"{API_ROOT}/auth/login"
LOGOUT_PATH = f"{API_ROOT}/auth/logout"
LIBRARY_ACCESS_PATH = f"{API_ROOT}/library/access"
BOOKS_PATH = f"{API_ROOT}/library/books"

# ---------- Console ----------
def env_flag(value: str) -> bool:
    return value.strip() not in ("", "0", "false", "False")


def log_level(value: str) -> str:
    """Return a level name logging accepts, falling back to WARNING."""
    name = value.strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        return "WARNING"
    return name


HIDE_PASSWORD = env_flag(os.getenv("LIBRARY_CLIENT_HIDE_PASSWORD", "0"))
LOG_LEVEL = log_level(os.getenv("LIBRARY_CLIENT_LOG_LEVEL", "WARNING"))
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
