import grpc
import mongomock
import pytest

from app import create_server
from movies.movies_dao import MoviesDao
from movies.movies_views import MovieServiceServicer, MovieServiceStub


class AbortError(Exception):
    """Raised by FakeServicerContext.abort, like grpc's own context."""

    def __init__(self, code, details):
        super().__init__(f"{code}: {details}")
        self.code = code
        self.details = details


class FakeServicerContext:
    def __init__(self, active=True, time_remaining=None):
        self.active = active
        self.remaining = time_remaining
        self.code = None
        self.details = None

    def abort(self, code, details):
        self.code = code
        self.details = details
        raise AbortError(code, details)

    def is_active(self):
        return self.active

    def time_remaining(self):
        return self.remaining


@pytest.fixture
def collection():
    """A fresh in-memory Movies collection per test."""
    client = mongomock.MongoClient()
    yield client["MovieService"]["Movies"]
    client.close()


@pytest.fixture
def dao(collection):
    return MoviesDao(collection)


@pytest.fixture
def servicer(dao):
    return MovieServiceServicer(dao)


@pytest.fixture
def context():
    return FakeServicerContext()


@pytest.fixture
def stub(dao):
    """Client for a real grpc server bound to an ephemeral local port."""
    server, port = create_server(dao, "localhost:0", max_workers=4)
    server.start()
    channel = grpc.insecure_channel(f"localhost:{port}")
    try:
        yield MovieServiceStub(channel)
    finally:
        channel.close()
        server.stop(None)
