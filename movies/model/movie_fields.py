from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class MovieField:
    attribute: str
    wire: str  # JSON name of the protobuf field
    storage: str  # key in the MongoDB document
    type: type


MOVIE_FIELDS: Tuple[MovieField, ...] = (
    MovieField("title", "title", "title", str),
    MovieField("description", "description", "description", str),
    MovieField("release_date", "releaseDate", "releasedate", str),
    MovieField("director", "director", "director", str),
    MovieField("genre", "genre", "genre", str),
    MovieField("rating", "rating", "rating", float),
    MovieField("runtime", "runtime", "runtime", int),
    MovieField("poster", "poster", "poster", str),
)

STORAGE_KEYS: Dict[str, str] = {field.attribute: field.storage for field in MOVIE_FIELDS}
