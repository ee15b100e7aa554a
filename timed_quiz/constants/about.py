"""Static metadata describing Timed Quiz."""

APP_NAME = "Timed Quiz"
APP_VERSION = "0.1"
