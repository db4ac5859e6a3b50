import functools
import logging
import threading
import time


def log_call(*, show_args=True, level=logging.DEBUG):
    """
    Tracing decorator for lifecycle methods.

    Logs entry and exit of the wrapped call together with the calling thread
    and the elapsed time. Exceptions are logged and re-raised unchanged.

    Args:
        show_args: Log function arguments (default: True)
        level: Level used for the trace records (default: DEBUG)
    """

    def decorator(func):
        logger = logging.getLogger(func.__module__)
        name = func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not logger.isEnabledFor(level):
                return func(*args, **kwargs)

            thread = threading.current_thread().name
            if show_args:
                # Skip ``self`` for methods
                shown = args[1:] if args and hasattr(args[0], func.__name__) else args
                signature = ", ".join(
                    [repr(a) for a in shown] + [f"{k}={v!r}" for k, v in kwargs.items()]
                )
                logger.log(level, "-> %s(%s) [%s]", name, signature, thread)
            else:
                logger.log(level, "-> %s [%s]", name, thread)

            started = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.log(
                    level, "x %s raised %s: %s", name, type(e).__name__, e
                )
                raise

            elapsed_ms = (time.monotonic() - started) * 1000
            logger.log(level, "<- %s (%.1f ms)", name, elapsed_ms)
            return result

        return wrapper

    return decorator
