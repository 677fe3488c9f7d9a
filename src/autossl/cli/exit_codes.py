"""Exit codes for the autossl CLI."""

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INVALID_USAGE = 2

# Shell convention for a child killed by a signal: 128 + signal number
EXIT_SIGNAL_BASE = 128
