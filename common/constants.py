"""Project-wide constants shared by the server and the CLI."""

DEFAULT_SERVER_PORT: int = 3000

MAX_FILE_BYTES: int = 50 * 1024 * 1024  # 50 MiB per uploaded file

NAMESPACE_FORM_FIELD: str = "username"

MAX_NAMESPACE_LENGTH: int = 128
