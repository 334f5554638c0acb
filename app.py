from concurrent import futures
import logging
import signal
import sys
import threading
from typing import Tuple

import grpc
from pymongo import MongoClient

from common.utils.exceptions import StorageError
from common.utils.logging_service import LOG_FORMAT, LOG_LEVEL
from common.utils.utils import (
    GRPC_ADDRESS,
    GRPC_MAX_WORKERS,
    GRPC_SHUTDOWN_GRACE,
    MONGO_URL,
    connect_to_mongo,
    get_movies_collection,
)
from movies.movies_dao import MoviesDao
from movies.movies_views import MovieServiceServicer, add_movie_service_to_server

logging.basicConfig(
    level=LOG_LEVEL,
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],  # Log to stdout
)

logger = logging.getLogger(__name__)


def create_server(
    dao: MoviesDao, address: str = GRPC_ADDRESS, max_workers: int = GRPC_MAX_WORKERS
) -> Tuple[grpc.Server, int]:
    """
    Builds a grpc server serving movie.MovieService on address.

    Returns the server (not started) and the port it is bound to.
    """
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers))
    add_movie_service_to_server(MovieServiceServicer(dao), server)

    port = server.add_insecure_port(address)
    if port == 0:
        raise RuntimeError(f"Unable to listen on {address}")

    return server, port


def stop(server: grpc.Server, client: MongoClient, grace: float = GRPC_SHUTDOWN_GRACE):
    logger.info("Stopping the server...")
    # stop accepting new calls, give in-flight calls the grace period
    server.stop(grace).wait()

    logger.info("Closing MongoDB connection")
    client.close()
    logger.info("Done.")


def serve():
    logger.info("Connecting to MongoDB...")
    try:
        client = connect_to_mongo(MONGO_URL)
    except StorageError as e:
        logger.critical(e.message)
        sys.exit(1)

    dao = MoviesDao(get_movies_collection(client))

    try:
        server, port = create_server(dao)
    except RuntimeError as e:
        logger.critical(f"Unable to start server: {e}")
        client.close()
        sys.exit(1)

    shutdown = threading.Event()

    def request_shutdown(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}")
        shutdown.set()

    signal.signal(signal.SIGINT, request_shutdown)
    signal.signal(signal.SIGTERM, request_shutdown)

    server.start()
    logger.info(f"Server successfully started on {GRPC_ADDRESS} (port {port})")

    shutdown.wait()
    stop(server, client)


if __name__ == "__main__":
    serve()
