"""Project-wide constants shared by the server and the CLI."""

DEFAULT_STORE_DIR: str = "./files"
DEFAULT_SERVER_PORT: int = 8000
STREAM_PIECE_SIZE: int = 64 * 1024  # 64 KiB read/write piece
MAX_REQUEST_BODY_BYTES: int = 1024 * 1024 * 10000
