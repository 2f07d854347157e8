# SPDX-License-Identifier: BSD-2
import logging
from typing import Union

logger = logging.getLogger("tpm2_tools")

# highlight using ANSI color codes
blue = "\x1b[34m"
cyan = "\x1b[96m"
yellow = "\x1b[93m"
light_grey = "\x1b[37m"
reset = "\x1b[0m"

LOG_LEVELS = {
    "none": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def log_level_from_string(value: str) -> int:
    try:
        return LOG_LEVELS[value.lower()]
    except KeyError:
        raise ValueError(
            f'Unknown log level "{value}", expected one of: {", ".join(LOG_LEVELS)}'
        )


def setup_logging(
    level: Union[int, str] = logging.WARNING, color: bool = False
) -> logging.Handler:
    """Send the tools' log records to stderr.

    Replaces a handler installed by an earlier call, so it is safe to call more
    than once.

    Args:
        level (Union[int, str]): A logging level or one of the LOG_LEVELS names.
        color (bool): Highlight the output with ANSI colors.

    Returns:
        The installed handler.
    """
    if isinstance(level, str):
        level = log_level_from_string(level)

    if color:
        fmt = (
            f"{light_grey}[%(levelname)s]{reset} {blue}%(pathname)s:%(lineno)d{reset}"
            f" - {cyan}%(name)s {yellow}%(message)s{reset}"
        )
    else:
        fmt = "[%(levelname)s] %(pathname)s:%(lineno)d - %(name)s %(message)s"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt, "%Y-%m-%d %H:%M:%S"))

    for old in list(logger.handlers):
        if getattr(old, "_tpm2_tools_handler", False):
            logger.removeHandler(old)
    handler._tpm2_tools_handler = True

    logger.addHandler(handler)
    logger.setLevel(level)
    return handler

