from pathlib import Path

# Entrius 2025
# =============================================================================
# GitHub API
# =============================================================================
BASE_GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_ACCEPT = "application/vnd.github+json"
USER_AGENT = "gh-checkproxy"

CHECK_RUNS_PER_PAGE = 100
BRANCH_LOOKUP_PER_PAGE = 5  # branch lookups return 0 or 1 open PR in practice

HTTP_TIMEOUT_SECONDS = 15

# =============================================================================
# Rate Limit Monitoring
# =============================================================================
RATE_LIMIT_MIN_REMAINING = 10  # Warn once remaining requests drop to this

# =============================================================================
# Watch Mode
# =============================================================================
DEFAULT_WATCH_INTERVAL_SECONDS = 10.0

# =============================================================================
# Exit Codes
# =============================================================================
EXIT_ALL_PASSED = 0
EXIT_FAILED = 1
EXIT_PENDING = 8  # gh CLI convention for checks still pending

# =============================================================================
# Environment & Config
# =============================================================================
TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")
PROXY_URL_ENV_VAR = "GH_CHECKPROXY_URL"

CHECKPROXY_DIR = Path.home() / ".config" / "gh-checkproxy"
CONFIG_FILE = CHECKPROXY_DIR / "config.json"
CONFIG_KEYS = ("proxy_url", "repo", "interval")
