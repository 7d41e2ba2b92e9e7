"""Application constants."""

# Submission limits (one workout)
MAX_EXERCISES_PER_WORKOUT = 20
MAX_SETS_PER_EXERCISE = 10

# Alert channel for conditions an operator must reconcile by hand
ALERT_LOGGER_NAME = "ironlog.alerts"

# Relative tolerance when cross-checking client-sent volume against the server value
VOLUME_MISMATCH_TOLERANCE = 1e-6
