import threading
from typing import Callable, Optional, TypeVar
from subtitlekit.core.errors import PipelineTimeoutError
from subtitlekit.utils.logger import logger

T = TypeVar("T")


def run_with_deadline(fn: Callable[[], T], timeout: Optional[float]) -> T:
    """Run ``fn`` under a wall-clock deadline.

    On expiry the result is abandoned and PipelineTimeoutError is raised. The
    worker is a daemon thread, so an abandoned call never holds up interpreter
    exit.
    """
    if not timeout:
        return fn()
    outcome = {}

    def worker():
        try:
            outcome["value"] = fn()
        except BaseException as e:
            outcome["error"] = e

    thread = threading.Thread(target=worker, name="subtitlekit-deadline", daemon=True)
    thread.start()
    thread.join(timeout)
    if thread.is_alive():
        logger.warning(f"Deadline of {timeout:g}s exceeded; discarding partial result")
        raise PipelineTimeoutError(timeout)
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]
