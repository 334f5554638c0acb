from bson import ObjectId
from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_dump, post_load

from movies.model.movie import Movie
from movies.model.movie_fields import STORAGE_KEYS


class ObjectIdField(fields.Field):
    """Hex string on the Movie, bson.ObjectId in the document."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return ObjectId(value)

    def _deserialize(self, value, attr, data, **kwargs):
        if not ObjectId.is_valid(value):
            raise ValidationError("Not a valid ObjectId.")
        return str(ObjectId(value))


class MovieDocumentSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = ObjectIdField(data_key="_id", allow_none=True)
    title = fields.String(data_key=STORAGE_KEYS["title"], allow_none=True)
    description = fields.String(data_key=STORAGE_KEYS["description"], allow_none=True)
    release_date = fields.String(data_key=STORAGE_KEYS["release_date"], allow_none=True)
    director = fields.String(data_key=STORAGE_KEYS["director"], allow_none=True)
    genre = fields.String(data_key=STORAGE_KEYS["genre"], allow_none=True)
    rating = fields.Float(data_key=STORAGE_KEYS["rating"], allow_none=True, allow_nan=True)
    runtime = fields.Integer(data_key=STORAGE_KEYS["runtime"], allow_none=True)
    poster = fields.String(data_key=STORAGE_KEYS["poster"], allow_none=True)

    @post_dump
    def remove_absent_fields(self, data, **kwargs):
        # absent fields are left out of the document, never stored as null
        return {key: value for key, value in data.items() if value is not None}

    @post_load
    def make_movie(self, data, **kwargs) -> Movie:
        return Movie(**data)


movie_document_schema = MovieDocumentSchema()
