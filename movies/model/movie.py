from dataclasses import dataclass, fields, replace
from typing import Optional

from movies.model.movie_fields import MOVIE_FIELDS
from movies.proto import movie_pb


@dataclass
class Movie:
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[str] = None  # kept as the text the client sent
    director: Optional[str] = None
    genre: Optional[str] = None
    rating: Optional[float] = None
    runtime: Optional[int] = None
    poster: Optional[str] = None

    @classmethod
    def from_proto(cls, message) -> "Movie":
        """
        Builds a Movie from a movie_pb.Movie message.

        proto3 scalars carry no presence, so a default value ("", 0, 0.0)
        is read as an absent field.
        """
        values = {
            field.attribute: getattr(message, field.attribute) or None
            for field in MOVIE_FIELDS
        }
        return cls(id=message.id or None, **values)

    def to_proto(self):
        message = movie_pb.Movie()
        for field in fields(self):
            value = getattr(self, field.name)
            if value is not None:
                setattr(message, field.name, value)
        return message

    def without_id(self) -> "Movie":
        return replace(self, id=None)
