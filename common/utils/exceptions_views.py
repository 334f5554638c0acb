import inspect
from functools import wraps

import grpc
import pymongo

from common.utils.exceptions import MovieServiceError
from common.utils.logging_service import logger


def __abort(context, error: Exception):
    if isinstance(error, MovieServiceError):
        if error.status_code == grpc.StatusCode.INTERNAL:
            logger.error(f"{type(error).__name__}: {error.message}")
        else:
            logger.warning(f"{type(error).__name__}: {error.message}")
        context.abort(error.status_code, error.message)
    else:
        logger.exception("Unhandled error while serving request")
        context.abort(grpc.StatusCode.INTERNAL, f"Internal error: {error}")


# calls without a deadline report a remaining time far beyond this
MAX_DEADLINE_SECONDS = 24 * 60 * 60


def __deadline(context):
    remaining = context.time_remaining()
    if remaining is None or remaining > MAX_DEADLINE_SECONDS:
        return pymongo.timeout(None)
    # an expired deadline still has to bound the storage call
    return pymongo.timeout(max(remaining, 0.001))


def grpc_error_handler(function):
    """
    Resolves every error raised by a servicer method into one status code.

    Storage calls made by the method run under the caller's deadline.
    Works for unary methods and for response-streaming generators.
    """
    if inspect.isgeneratorfunction(function):

        @wraps(function)
        def stream_decorator(self, request, context):
            stream = function(self, request, context)
            try:
                while True:
                    # the deadline is scoped to one step, never held across a yield
                    with __deadline(context):
                        try:
                            response = next(stream)
                        except StopIteration:
                            return
                    yield response
            except Exception as e:
                __abort(context, e)
            finally:
                stream.close()

        return stream_decorator

    @wraps(function)
    def decorator(self, request, context):
        try:
            with __deadline(context):
                return function(self, request, context)
        except Exception as e:
            __abort(context, e)

    return decorator
