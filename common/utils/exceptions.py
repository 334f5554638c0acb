import grpc


class MovieServiceError(Exception):
    """Base error; status_code is the gRPC status the handlers answer with."""

    status_code = grpc.StatusCode.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidMovieError(MovieServiceError):
    status_code = grpc.StatusCode.INVALID_ARGUMENT


class InvalidMovieIdError(InvalidMovieError):
    pass


class MovieNotFoundError(MovieServiceError):
    status_code = grpc.StatusCode.NOT_FOUND


class StorageError(MovieServiceError):
    status_code = grpc.StatusCode.INTERNAL


class StorageTimeoutError(StorageError):
    status_code = grpc.StatusCode.DEADLINE_EXCEEDED


class CursorError(StorageError):
    pass


class MovieDecodeError(MovieServiceError):
    status_code = grpc.StatusCode.UNAVAILABLE
