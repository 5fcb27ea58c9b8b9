"""Error reporting helpers for commonlink loggers."""

from __future__ import annotations

import logging

from commonlink.errors import CommonLinkError


def get_user_message(exc: BaseException) -> str:
    if isinstance(exc, CommonLinkError):
        return exc.user_message
    return f"Unexpected error: {exc}"


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    *,
    show_traceback: bool = False,
) -> str:
    """Log the user-facing message with any error context.

    The traceback goes to DEBUG unless ``show_traceback`` is set.
    """
    user_message = get_user_message(exc)
    context = exc.context if isinstance(exc, CommonLinkError) else None
    if context:
        logger.error("%s (%s)", user_message, context)
    else:
        logger.error("%s", user_message)
    logger.log(
        logging.ERROR if show_traceback else logging.DEBUG,
        "Detailed traceback:",
        exc_info=exc,
    )
    return user_message


__all__ = ["get_user_message", "log_exception"]
