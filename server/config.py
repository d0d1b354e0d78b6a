"""Configuration settings for the file store server."""

import os
from common.constants import DEFAULT_STORE_DIR, DEFAULT_SERVER_PORT, MAX_REQUEST_BODY_BYTES


STORE_DIR = os.environ.get("FILEHOST_STORE_DIR", DEFAULT_STORE_DIR)

SERVER_HOST = os.environ.get("FILEHOST_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("FILEHOST_PORT", str(DEFAULT_SERVER_PORT)))

MAX_BODY_BYTES = int(os.environ.get("FILEHOST_MAX_REQUEST_BODY_BYTES", str(MAX_REQUEST_BODY_BYTES)))

PUBLIC_FILES = os.environ.get("FILEHOST_PUBLIC_FILES", "true").lower() in ("1", "true", "yes")

UI_DIR = os.environ.get("FILEHOST_UI_DIR")
