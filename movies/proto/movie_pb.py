"""
Protobuf messages of the movie.MovieService contract.

The message classes are built from a FileDescriptorProto at import time
instead of protoc output, so the Movie message is derived from the same
field table as the storage schema. movie.proto next to this module is the
equivalent definition for clients in other languages.
"""
from typing import Dict, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

from movies.model.movie_fields import MOVIE_FIELDS

PACKAGE = "movie"
SERVICE_NAME = f"{PACKAGE}.MovieService"

_Field = descriptor_pb2.FieldDescriptorProto

_SCALAR_TYPES = {
    str: _Field.TYPE_STRING,
    float: _Field.TYPE_DOUBLE,
    int: _Field.TYPE_INT32,
    bool: _Field.TYPE_BOOL,
}

# message name -> ((field name, json name, python type or message name), ...)
MESSAGES: Dict[str, Tuple[Tuple[str, str, object], ...]] = {
    "Movie": (("id", "id", str),)
    + tuple((field.attribute, field.wire, field.type) for field in MOVIE_FIELDS),
    "CreateMovieReq": (("movie", "movie", "Movie"),),
    "CreateMovieRes": (("movie", "movie", "Movie"),),
    "ReadMovieReq": (("id", "id", str),),
    "ReadMovieRes": (("movie", "movie", "Movie"),),
    "UpdateMovieReq": (("movie", "movie", "Movie"),),
    "UpdateMovieRes": (("movie", "movie", "Movie"),),
    "DeleteMovieReq": (("id", "id", str),),
    "DeleteMovieRes": (("success", "success", bool),),
    "ListMoviesReq": (),
    "ListMoviesRes": (("movie", "movie", "Movie"),),
}

# rpc name -> (request message, response message, server streaming)
RPC_METHODS: Dict[str, Tuple[str, str, bool]] = {
    "CreateMovie": ("CreateMovieReq", "CreateMovieRes", False),
    "ReadMovie": ("ReadMovieReq", "ReadMovieRes", False),
    "UpdateMovie": ("UpdateMovieReq", "UpdateMovieRes", False),
    "DeleteMovie": ("DeleteMovieReq", "DeleteMovieRes", False),
    "ListMovies": ("ListMoviesReq", "ListMoviesRes", True),
}


def _full_name(message_name: str) -> str:
    return f".{PACKAGE}.{message_name}"


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="movie.proto", package=PACKAGE, syntax="proto3"
    )

    for message_name, message_fields in MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        for number, (name, json_name, field_type) in enumerate(message_fields, start=1):
            field = message.field.add(
                name=name,
                json_name=json_name,
                number=number,
                label=_Field.LABEL_OPTIONAL,
            )
            if isinstance(field_type, str):
                field.type = _Field.TYPE_MESSAGE
                field.type_name = _full_name(field_type)
            else:
                field.type = _SCALAR_TYPES[field_type]

    service = file_proto.service.add(name="MovieService")
    for rpc_name, (request, response, streaming) in RPC_METHODS.items():
        service.method.add(
            name=rpc_name,
            input_type=_full_name(request),
            output_type=_full_name(response),
            server_streaming=streaming,
        )

    return file_proto


pool = descriptor_pool.DescriptorPool()
pool.AddSerializedFile(_build_file().SerializeToString())


def get_message_class(message_name: str):
    return message_factory.GetMessageClass(
        pool.FindMessageTypeByName(f"{PACKAGE}.{message_name}")
    )


Movie = get_message_class("Movie")
CreateMovieReq = get_message_class("CreateMovieReq")
CreateMovieRes = get_message_class("CreateMovieRes")
ReadMovieReq = get_message_class("ReadMovieReq")
ReadMovieRes = get_message_class("ReadMovieRes")
UpdateMovieReq = get_message_class("UpdateMovieReq")
UpdateMovieRes = get_message_class("UpdateMovieRes")
DeleteMovieReq = get_message_class("DeleteMovieReq")
DeleteMovieRes = get_message_class("DeleteMovieRes")
ListMoviesReq = get_message_class("ListMoviesReq")
ListMoviesRes = get_message_class("ListMoviesRes")
