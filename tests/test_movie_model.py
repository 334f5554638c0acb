from dataclasses import fields

import pytest
from bson import ObjectId
from marshmallow import ValidationError

from movies.model.movie import Movie
from movies.model.movie_fields import MOVIE_FIELDS, STORAGE_KEYS
from movies.proto import movie_pb
from schema.movie_schema import movie_document_schema


def test_field_table_covers_every_movie_attribute_once():
    attributes = [field.attribute for field in MOVIE_FIELDS]
    movie_attributes = [field.name for field in fields(Movie) if field.name != "id"]

    assert sorted(attributes) == sorted(movie_attributes)
    assert len({field.wire for field in MOVIE_FIELDS}) == len(MOVIE_FIELDS)
    assert len({field.storage for field in MOVIE_FIELDS}) == len(MOVIE_FIELDS)


def test_release_date_names_differ_between_wire_and_storage():
    descriptor = movie_pb.Movie.DESCRIPTOR.fields_by_name["release_date"]

    assert descriptor.json_name == "releaseDate"
    assert STORAGE_KEYS["release_date"] == "releasedate"


def test_list_movies_is_server_streaming():
    service = movie_pb.pool.FindServiceByName(movie_pb.SERVICE_NAME)

    assert service.methods_by_name["ListMovies"].server_streaming
    assert not service.methods_by_name["ReadMovie"].server_streaming


def test_from_proto_reads_defaults_as_absent():
    message = movie_pb.Movie(title="Dune", rating=4.8, runtime=155)

    movie = Movie.from_proto(message)

    assert movie == Movie(title="Dune", rating=4.8, runtime=155)


def test_to_proto_skips_absent_fields():
    movie = Movie(id="65f1c0ffee0000000000abcd", title="Alien", runtime=117)

    message = movie.to_proto()

    assert message.id == "65f1c0ffee0000000000abcd"
    assert message.title == "Alien"
    assert message.runtime == 117
    assert message.description == ""
    assert Movie.from_proto(message) == movie


def test_dump_omits_absent_fields_and_uses_storage_names():
    movie = Movie(title="Heat", release_date="1995-12-15", rating=4.5)

    document = movie_document_schema.dump(movie)

    assert document == {"title": "Heat", "releasedate": "1995-12-15", "rating": 4.5}


def test_dump_converts_id_to_object_id():
    oid = ObjectId()

    document = movie_document_schema.dump(Movie(id=str(oid), title="Heat"))

    assert document["_id"] == oid


def test_load_builds_movie_with_hex_id():
    oid = ObjectId()
    document = {"_id": oid, "title": "Heat", "releasedate": "1995", "runtime": 170}

    movie = movie_document_schema.load(document)

    assert movie == Movie(id=str(oid), title="Heat", release_date="1995", runtime=170)


def test_load_ignores_unknown_keys_and_nulls():
    movie = movie_document_schema.load(
        {"_id": ObjectId(), "title": "Heat", "director": None, "legacy": "x"}
    )

    assert movie.title == "Heat"
    assert movie.director is None


def test_load_rejects_mistyped_values():
    with pytest.raises(ValidationError):
        movie_document_schema.load({"_id": ObjectId(), "rating": "five stars"})
