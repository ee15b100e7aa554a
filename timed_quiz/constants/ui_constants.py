"""Qt UI constants used across widgets."""

from timed_quiz.constants.about import APP_NAME

WINDOW_TITLE: str = APP_NAME
WINDOW_MIN_WIDTH: int = 520
QUESTION_FONT_SIZE: int = 14

WELCOME_HEADING: str = "Welcome to the Quiz!"
WELCOME_PROMPT: str = "Enter your nickname to start."
NICKNAME_PLACEHOLDER: str = "Nickname"
START_BUTTON: str = "Start Game"
LOADING_TEXT: str = "Loading question..."
QUESTION_HEADING: str = "Question:"
QUESTION_TEXT_MISSING: str = "The server sent no question text."
ANSWER_PLACEHOLDER: str = "Your answer"
SUBMIT_BUTTON: str = "Submit Answer"
SUBMITTING_TEXT: str = "Checking your answer..."
VICTORY_HEADING: str = "You Won!"
GAME_OVER_HEADING: str = "Game Over"
RESTART_BUTTON: str = "Try Again"
LEADERBOARD_HEADING: str = "Top 5 Fastest Players"
LEADERBOARD_EMPTY: str = "No results yet."
TIME_REMAINING_TEMPLATE: str = "{seconds}s remaining"
TIME_PROGRESS_RANGE: int = 1000
