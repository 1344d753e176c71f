import logging
import subprocess
from typing import List
from flacjack.domain.errors import StageError

logger = logging.getLogger(__name__)


def run_tool(cmd: List[str], stage: str) -> subprocess.CompletedProcess:
    """Runs an external tool to completion and returns its captured output.

    No timeout is applied: a hung tool hangs the calling worker.

    Raises:
        StageError: the tool could not be started or exited non-zero. The last
            line of stderr is appended to the message when there is one.
    """
    logger.debug(f"TOOL_CMD [{stage}]: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
    except OSError as e:
        raise StageError(stage, f"{cmd[0]} could not be started: {e}") from e

    if result.returncode != 0:
        message = f"{cmd[0]} exited with code {result.returncode}"
        stderr_lines = (result.stderr or "").strip().splitlines()
        if stderr_lines:
            message = f"{message}: {stderr_lines[-1].strip()}"
        raise StageError(stage, message)
    return result
