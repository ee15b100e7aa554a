"""Quiz-related constants shared across UI and core layers."""

DEFAULT_TIME_LIMIT_MS: int = 10_000
TIMER_TICK_DIVISOR: int = 100

LEADERBOARD_CAPACITY: int = 5
LEADERBOARD_STORAGE_KEY: str = "quiz_high_scores"

NICKNAME_REQUIRED_MESSAGE: str = "Please enter a nickname to start."
ANSWER_REQUIRED_MESSAGE: str = "Please enter or select an answer."
UNKNOWN_ALTERNATIVE_MESSAGE: str = "Please choose one of the listed alternatives."

NETWORK_ERROR_MESSAGE: str = "Network error or server down."
TIMEOUT_MESSAGE: str = "Time is up! Game over."
REJECTED_ANSWER_MESSAGE: str = "Wrong answer! Game over."
VICTORY_MESSAGE_TEMPLATE: str = "Well done, {nickname}! You finished in {seconds:.2f} seconds."
