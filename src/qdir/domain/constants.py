from __future__ import annotations

"""
Domain Constants.

Centralizes the defaults shared by the configuration layer, the queue
publisher and the CLI.
"""

from qdir import __version__

APP_NAME = "qdir"
APP_VERSION = __version__
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# QUEUE BACKEND DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_QUEUE_NAME = "qdir"
DEFAULT_REDIS_HOST = "127.0.0.1"
DEFAULT_REDIS_PORT = 6379
DEFAULT_CONNECT_TIMEOUT = 1.5  # seconds

# -----------------------------------------------------------------------------
# TRAVERSAL DEFAULTS
# -----------------------------------------------------------------------------

# POSIX guarantees at least 20 descriptors per process, three of which are
# the standard streams. 15 leaves room for the Redis socket and log files.
DEFAULT_MAX_OPEN_DIRS = 15

HIDDEN_PREFIX = "."

# -----------------------------------------------------------------------------
# PROCESS EXIT CODES
# -----------------------------------------------------------------------------

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_ARGUMENT = 2
EXIT_INTERRUPTED = 130
