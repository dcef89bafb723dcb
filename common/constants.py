"""Project-wide constants (part size, header names, timeouts)."""

DEFAULT_PART_SIZE_BYTES: int = 1024 * 1024  # 1 MiB default part size
STREAM_CHUNK_SIZE_BYTES: int = 8192

DEFAULT_MAX_CONCURRENCY: int = 4
DEFAULT_USER_NAME: str = "anonymous"

UPLOAD_BASE_TIMEOUT_SECONDS: float = 30.0
UPLOAD_TIMEOUT_PER_MB_SECONDS: float = 0.1

HEADER_FILE_NAME = "fileName"
HEADER_PART_NUMBERS = "partNumbers"
HEADER_PART_NUMBER = "partNumber"
HEADER_UPLOAD_OFFSET = "uploadOffset"
HEADER_UPLOAD_LENGTH = "uploadLength"
HEADER_USER_NAME = "userName"
HEADER_FILE_DIR = "filedir"
HEADER_REQUEST_ID = "X-Request-ID"
