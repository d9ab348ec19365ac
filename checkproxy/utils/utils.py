import math
import re
from typing import Optional, Tuple

from checkproxy.errors import ConfigurationError

REPO_PATTERN = re.compile(r'^[a-zA-Z0-9._-]+/[a-zA-Z0-9._-]+$')
DURATION_PART_PATTERN = re.compile(r'(\d+(?:\.\d+)?)(ms|s|m|h)')
DURATION_UNITS = {'ms': 0.001, 's': 1.0, 'm': 60.0, 'h': 3600.0}


def first_non_empty(*values: Optional[str]) -> str:
    for value in values:
        if value:
            return value
    return ''


def parse_repo_name(repo: str) -> Tuple[str, str]:
    """Split 'owner/repo' into its parts.

    Raises:
        ConfigurationError: if the value is not a single owner/repo pair.
    """
    repo = repo.strip()
    if not REPO_PATTERN.match(repo):
        raise ConfigurationError(f"invalid repo format '{repo}': use owner/repo")
    owner, name = repo.split('/', 1)
    return owner, name


def parse_duration(value: str) -> float:
    """Parse a Go-style duration ('10s', '1m30s', '500ms') or bare seconds into seconds.

    Raises:
        ValueError: on unparseable input.
    """
    text = str(value).strip().lower()
    if not text:
        raise ValueError('empty duration')
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValueError(f'invalid duration {value!r}')
        return seconds

    pos = 0
    total = 0.0
    for match in DURATION_PART_PATTERN.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f'invalid duration {value!r}')
    return total


def mask_token(token: str) -> str:
    if len(token) < 8:
        return '***'
    return f'{token[:4]}***...{token[-4:]}'
