"""Shared constants for resolution scaling and the action loop."""

# Model-visible resolution bounds (inclusive)
MAX_RESOLUTION_WIDTH = 1920
MAX_RESOLUTION_HEIGHT = 1080
MIN_RESOLUTION_WIDTH = 800
MIN_RESOLUTION_HEIGHT = 600

# Caller-owned time limit for one natural-language instruction (seconds)
DEFAULT_INSTRUCTION_TIMEOUT = 300.0

# Planner defaults
DEFAULT_MODEL = "openai/computer-use-preview"
DEFAULT_ENVIRONMENT = "linux"
DEFAULT_REASONING_EFFORT = "medium"
DEFAULT_REQUEST_TIMEOUT = 120.0

# Round-trip error tolerated by the scaler self-check (pixels per axis)
ROUND_TRIP_TOLERANCE = 1

# User-facing messages for terminal notifications
STOPPED_BY_USER_MESSAGE = "Generation stopped by user"
TIMED_OUT_MESSAGE = "Generation stopped: time limit reached"
QUOTA_EXCEEDED_MESSAGE = "API quota exceeded. Please try again later."
SERVICE_ERROR_MESSAGE = "An error occurred with the AI service. Please try again."
