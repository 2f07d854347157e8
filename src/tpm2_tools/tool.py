# SPDX-License-Identifier: BSD-2
"""
Runs a tool's command and turns its outcome into the process exit code.
"""
import logging
from typing import Any, Callable, Dict, Optional

from .config import load_config
from .constants import TOOL_RC
from .error import tool_rc_from_tpm
from .hierarchy import HierarchyParseError
from .log import setup_logging
from .TSS2_Exception import TSS2_Exception

logger = logging.getLogger(__name__)


def run_tool(func: Callable[..., Optional[int]], *args, **kwargs) -> TOOL_RC:
    """Invokes a tool command.

    The command may return a TOOL_RC, None for success, or raise. Return codes
    reported through TSS2_Exception are classified with tool_rc_from_tpm, bad
    hierarchy options are an option error. Other exceptions propagate.
    """
    try:
        rc = func(*args, **kwargs)
    except TSS2_Exception as e:
        logger.error(f"{e}")
        return tool_rc_from_tpm(e.rc)
    except HierarchyParseError as e:
        logger.error(f"{e}")
        return TOOL_RC.OPTION_ERROR

    if rc is None:
        return TOOL_RC.SUCCESS
    return TOOL_RC(rc)


def tool_main(
    func: Callable[..., Optional[int]],
    *args,
    config: Optional[Dict[str, Any]] = None,
    **kwargs,
) -> int:
    """Sets up logging from the configuration and runs the command.

    Returns:
        The exit code for sys.exit().
    """
    if config is None:
        config = load_config()
    setup_logging(config.get("log_level", "warning"))
    return int(run_tool(func, *args, **kwargs))
