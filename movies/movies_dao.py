from contextlib import contextmanager
from typing import Any, Dict, Iterator

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from common.utils.exceptions import (
    CursorError,
    MovieNotFoundError,
    StorageError,
    StorageTimeoutError,
)
from movies.model.movie_fields import MOVIE_FIELDS

Document = Dict[str, Any]


def id_filter(oid: ObjectId) -> Dict[str, ObjectId]:
    return {"_id": oid}


def replace_set(document: Document) -> Dict[str, Document]:
    """
    Builds an update that replaces every non-id field of a movie.

    Fields missing from document are unset so that no pre-update value
    survives the update.
    """
    present = {
        field.storage: document[field.storage]
        for field in MOVIE_FIELDS
        if document.get(field.storage) is not None
    }
    absent = {field.storage: "" for field in MOVIE_FIELDS if field.storage not in present}

    update = {}
    if present:
        update["$set"] = present
    if absent:
        update["$unset"] = absent
    return update


def _storage_error(e: PyMongoError, action: str) -> StorageError:
    if e.timeout:
        return StorageTimeoutError(f"Timed out while trying to {action}: {e}")
    return StorageError(f"Internal error while trying to {action}: {e}")


class MoviesDao:
    def __init__(self, collection: Collection):
        self.collection = collection

    def insert_document(self, document: Document) -> ObjectId:
        document = {key: value for key, value in document.items() if key != "_id"}
        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            raise _storage_error(e, "insert movie") from e

        return result.inserted_id

    def find_document(self, oid: ObjectId) -> Document:
        try:
            document = self.collection.find_one(id_filter(oid))
        except PyMongoError as e:
            raise _storage_error(e, f"find movie {oid}") from e

        if document is None:
            raise MovieNotFoundError(f"Could not find movie with Object Id {oid}")
        return document

    @contextmanager
    def find_documents(self) -> Iterator[Iterator[Document]]:
        """
        Opens a cursor over every movie document.

        The cursor is closed when the with block exits, however it exits.
        """
        try:
            cursor = self.collection.find({})
        except PyMongoError as e:
            raise _storage_error(e, "list movies") from e

        try:
            yield self.__iterate(cursor)
        finally:
            cursor.close()

    @staticmethod
    def __iterate(cursor) -> Iterator[Document]:
        while True:
            try:
                document = next(cursor)
            except StopIteration:
                return
            except PyMongoError as e:
                raise CursorError(f"Unknown cursor error: {e}") from e
            yield document

    def replace_document(self, oid: ObjectId, document: Document) -> Document:
        try:
            updated = self.collection.find_one_and_update(
                id_filter(oid),
                replace_set(document),
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise _storage_error(e, f"update movie {oid}") from e

        if updated is None:
            raise MovieNotFoundError(f"Could not find movie with supplied ID {oid}")
        return updated

    def delete_document(self, oid: ObjectId) -> bool:
        try:
            result = self.collection.delete_one(id_filter(oid))
        except PyMongoError as e:
            raise _storage_error(e, f"delete movie {oid}") from e

        return result.deleted_count == 1
