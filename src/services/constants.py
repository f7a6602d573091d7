"""
Constants and shared defaults for cycle-related services.
"""

# Profile defaults used when a user has not supplied their own values
DEFAULT_CYCLE_LENGTH = 28
DEFAULT_BLEEDING_DURATION = 5
DEFAULT_PERIOD_LENGTH = 5

# Fixed luteal phase model: ovulation is 14 days before the next period,
# the fertile window runs from 5 days before to 1 day after ovulation
LUTEAL_PHASE_DAYS = 14
FERTILE_DAYS_BEFORE_OVULATION = 5
FERTILE_DAYS_AFTER_OVULATION = 1

# Forecasting
PREDICTION_COUNT = 12
PREDICTION_WINDOW = 6  # most recent cycles considered
MIN_CYCLES_FOR_PREDICTION = 3

# An open cycle (no end date) still covers days this close to its start
OPEN_PERIOD_WINDOW_DAYS = 10

# Reports
CURRENT_PERIOD_WINDOW_DAYS = 30
PERIOD_STATS_WINDOW_MONTHS = 6
SYMPTOM_CYCLE_MARGIN_DAYS = 2

# Notifications
PERIOD_ALERT_HORIZON_DAYS = 3

DEFAULT_INTENSITY = "medium"
UNSPECIFIED_MOOD = "Unspecified"
UNKNOWN_SYMPTOM = "Unknown"
UNKNOWN_BUCKET = "unknown"
