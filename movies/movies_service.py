from typing import Iterator, Optional

from bson import ObjectId
from marshmallow import ValidationError

from common.utils.exceptions import (
    InvalidMovieError,
    InvalidMovieIdError,
    MovieDecodeError,
    MovieNotFoundError,
    StorageError,
)
from common.utils.logging_service import logger
from common.utils.utils import time_it
from movies.model.movie import Movie
from movies.movies_dao import MoviesDao
from schema.movie_schema import movie_document_schema


def parse_movie_id(movie_id: Optional[str]) -> ObjectId:
    """
    Converts a hex string id into the ObjectId it addresses.

    :raises InvalidMovieIdError: when movie_id is not 24 hex characters.
    """
    if not isinstance(movie_id, str) or not ObjectId.is_valid(movie_id):
        raise InvalidMovieIdError(f"Could not convert to ObjectId: {movie_id!r}")
    return ObjectId(movie_id)


def __to_document(movie: Movie) -> dict:
    return movie_document_schema.dump(movie.without_id())


def __from_document(document: dict) -> Movie:
    return movie_document_schema.load(document)


@time_it
def create_movie(dao: MoviesDao, movie: Optional[Movie]) -> Movie:
    if movie is None:
        raise InvalidMovieError("Invalid movie")

    oid = dao.insert_document(__to_document(movie))
    logger.info(f"Created movie {oid}")

    created = movie.without_id()
    created.id = str(oid)
    return created


@time_it
def get_movie(dao: MoviesDao, movie_id: str) -> Movie:
    oid = parse_movie_id(movie_id)
    document = dao.find_document(oid)

    try:
        return __from_document(document)
    except ValidationError as e:
        raise StorageError(f"Could not decode movie {movie_id}: {e.messages}") from e


def get_movies(dao: MoviesDao) -> Iterator[Movie]:
    """
    Yields every movie, decoding each document as it comes off the cursor.

    :raises MovieDecodeError: on the first document that cannot be decoded.
    """
    with dao.find_documents() as documents:
        for document in documents:
            try:
                movie = __from_document(document)
            except ValidationError as e:
                raise MovieDecodeError(f"Could not decode data: {e.messages}") from e
            yield movie


@time_it
def update_movie(dao: MoviesDao, movie: Optional[Movie]) -> Movie:
    movie_id = movie.id if movie is not None else None
    oid = parse_movie_id(movie_id)

    updated = dao.replace_document(oid, __to_document(movie))
    logger.info(f"Updated movie {oid}")

    try:
        return __from_document(updated)
    except ValidationError as e:
        raise StorageError(f"Could not decode movie {movie_id}: {e.messages}") from e


@time_it
def delete_movie(dao: MoviesDao, movie_id: str) -> bool:
    oid = parse_movie_id(movie_id)

    if not dao.delete_document(oid):
        raise MovieNotFoundError(f"Could not find/delete movie with id {movie_id}")

    logger.info(f"Deleted movie {oid}")
    return True
