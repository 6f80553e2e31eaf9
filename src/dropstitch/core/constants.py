"""Centralized constants for Dropstitch."""

# =============================================================================
# Git layout
# =============================================================================

# Metadata directory at the repository root
GIT_DIR_NAME: str = ".git"

# Branch reflogs live under <git dir>/logs/refs/heads/<branch>
REFLOG_HEADS_PATH: tuple[str, ...] = ("logs", "refs", "heads")

# Ledgers live under <git dir>/<ledger dir>/refs/heads/<branch>
LEDGER_HEADS_PATH: tuple[str, ...] = ("refs", "heads")

DEFAULT_LEDGER_DIR: str = "dropstitch"

# Length of a full object name
HASH_LENGTH: int = 40

# =============================================================================
# Timeouts (in seconds)
# =============================================================================

# Git operation timeout
GIT_TIMEOUT: int = 10

# =============================================================================
# Configuration
# =============================================================================

# Per-user and per-project settings directory name
CONFIG_DIR_NAME: str = ".dropstitch"
