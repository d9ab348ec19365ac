import logging
import re
import subprocess
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

GIT_REMOTE_PATTERN = re.compile(r'github\.com[:/]([^/]+/[^/.]+?)(?:\.git)?/?$')


def _run_git_command(cmd: List[str], cwd: Optional[str] = None) -> Tuple[bool, str]:
    """Run a git command and return success status and output."""
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=True)
        return True, result.stdout.strip()
    except subprocess.CalledProcessError as e:
        logger.debug(f"Git command failed: {' '.join(cmd)}, Error: {(e.stderr or '').strip()}")
        return False, e.stderr.strip() if e.stderr else str(e)
    except OSError as e:
        # git not installed or cwd missing
        logger.debug(f"Could not run {' '.join(cmd)}: {e}")
        return False, str(e)


def get_current_branch(cwd: Optional[str] = None) -> Optional[str]:
    """Get the current git branch name, or None when detached or outside a repository."""
    success, output = _run_git_command(["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd)
    if not success or not output or output == "HEAD":
        return None
    return output


def parse_git_remote(remote: str) -> Optional[str]:
    """Extract owner/repo from a GitHub https or ssh remote URL."""
    match = GIT_REMOTE_PATTERN.search(remote.strip())
    return match.group(1) if match else None


def detect_repo(cwd: Optional[str] = None) -> Optional[str]:
    """Infer owner/repo from the origin remote."""
    success, output = _run_git_command(["git", "remote", "get-url", "origin"], cwd=cwd)
    if not success:
        return None
    return parse_git_remote(output)
