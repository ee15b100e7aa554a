"""Network configuration constants for the quiz client and practice server."""

DEFAULT_START_URL: str = "https://courselab.lnu.se/quiz/question/1"
DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
PRACTICE_START_PATH: str = "/question/1"
SHUTDOWN_WAIT_MS: int = 2_000
