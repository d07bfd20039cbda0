"""
Logging for the shopping assistant.

One application logger, `shopping_assistant`, writing to:
- {LOG_DIR}/assistant.log   everything from INFO up, with source location
- {LOG_DIR}/errors.log      ERROR and above only
- stderr                    WARNING and above

Conversation turns and catalog searches are logged as single-line dicts with
fixed prefixes ("TURN:", "SEARCH:", "API CALL:") so they can be grepped.
"""

import inspect
import logging
import os
import traceback
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, Optional

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

os.makedirs(LOG_DIR, exist_ok=True)

_FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s - %(message)s'
_CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# Truncation limits for logged user text
MESSAGE_PREVIEW_CHARS = 200
VARIABLE_PREVIEW_CHARS = 500


def _file_handler(filename: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(os.path.join(LOG_DIR, filename), encoding='utf-8')
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def setup_logger(name: str = 'shopping_assistant') -> logging.Logger:
    """Create the application logger; calling it again replaces the handlers."""
    app_logger = logging.getLogger(name)
    app_logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    app_logger.handlers.clear()
    app_logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    app_logger.addHandler(_file_handler('assistant.log', logging.INFO))
    app_logger.addHandler(_file_handler('errors.log', logging.ERROR))
    app_logger.addHandler(console_handler)
    return app_logger


logger = setup_logger()


def _preview(value: Any, limit: int) -> str:
    try:
        text = str(value)
    except Exception as e:
        return f"<unprintable {type(value).__name__}: {e}>"
    return text if len(text) <= limit else text[:limit] + "... (truncated)"


def log_error(error: Exception, context: str = "", additional_info: Optional[Dict[str, Any]] = None):
    """
    Log an exception with its traceback.

    Args:
        error: The exception being handled
        context: Where it happened, e.g. "chat endpoint - chat"
        additional_info: Extra key/values worth keeping with the error
    """
    lines = [f"ERROR in {context}: {type(error).__name__}: {error}"]
    if additional_info:
        lines.append(f"Additional Info: {additional_info}")
    lines.append(f"Traceback:\n{traceback.format_exc()}")
    logger.error("\n".join(lines))


def log_detailed_error(error: Exception, context: str = "", local_vars: Optional[Dict[str, Any]] = None,
                       additional_info: Optional[Dict[str, Any]] = None):
    """Like log_error, plus a truncated dump of the variables that led to the failure."""
    lines = [f"DETAILED ERROR in {context}: {error}", f"Error Type: {type(error).__name__}"]
    if additional_info:
        lines.append(f"Additional Info: {additional_info}")
    if local_vars:
        lines.append("Local Variables at Error:")
        lines.extend(f"  {name}: {_preview(value, VARIABLE_PREVIEW_CHARS)}" for name, value in local_vars.items())
    lines.append(f"Full Traceback:\n{traceback.format_exc()}")
    logger.error("\n".join(lines))


def log_api_call(api_name: str, endpoint: str, status: str, duration: float = None):
    """Log one call to Groq, Voyage or Redis search."""
    message = f"API CALL: {api_name} - {endpoint} - Status: {status}"
    if duration is not None:
        message += f" - Duration: {duration:.2f}s"
    logger.info(message)


def log_user_interaction(thread_id: str, user_message: str, bot_response: str, intent: str = None):
    """Log one processed conversation turn."""
    turn = {
        "timestamp": datetime.now().isoformat(),
        "thread_id": thread_id,
        "intent": intent,
        "user_message": _preview(user_message, MESSAGE_PREVIEW_CHARS),
        "assistant_intro": _preview(bot_response, MESSAGE_PREVIEW_CHARS),
    }
    logger.info(f"TURN: {turn}")


def log_search_query(thread_id: str, query: str, results_count: int, success: bool, search_type: Any = None):
    """Log one catalog search and its outcome."""
    search = {
        "timestamp": datetime.now().isoformat(),
        "thread_id": thread_id,
        "query": query,
        "results_count": results_count,
        "search_type": search_type,
        "success": success,
    }
    log = logger.info if success else logger.warning
    log(f"SEARCH: {search}")


def error_handler(context: str = ""):
    """
    Decorator that logs any exception escaping the wrapped function, then re-raises it.

    Works on both plain and async functions; FastAPI still sees the original
    signature through functools.wraps.
    """
    def decorator(func: Callable) -> Callable:
        def _log(e: Exception, args, kwargs):
            log_error(
                e,
                context=f"{context} - {func.__name__}",
                additional_info={
                    "args": _preview(args, MESSAGE_PREVIEW_CHARS),
                    "kwargs": _preview(kwargs, MESSAGE_PREVIEW_CHARS),
                },
            )

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _log(e, args, kwargs)
                    raise
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log(e, args, kwargs)
                raise
        return sync_wrapper

    return decorator
