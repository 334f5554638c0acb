import grpc

from common.utils.exceptions_views import grpc_error_handler
from common.utils.logging_service import logger
from movies.model.movie import Movie
from movies.movies_dao import MoviesDao
from movies.proto import movie_pb
import movies.movies_service as movies_service


class MovieServiceServicer:
    def __init__(self, dao: MoviesDao):
        self.dao = dao

    @grpc_error_handler
    def CreateMovie(self, request, context):
        movie = Movie.from_proto(request.movie) if request.HasField("movie") else None

        created = movies_service.create_movie(self.dao, movie)

        return movie_pb.CreateMovieRes(movie=created.to_proto())

    @grpc_error_handler
    def ReadMovie(self, request, context):
        movie = movies_service.get_movie(self.dao, request.id)

        return movie_pb.ReadMovieRes(movie=movie.to_proto())

    @grpc_error_handler
    def ListMovies(self, request, context):
        sent = 0
        for movie in movies_service.get_movies(self.dao):
            if not context.is_active():
                logger.info(f"ListMovies cancelled by caller after {sent} movies")
                return
            yield movie_pb.ListMoviesRes(movie=movie.to_proto())
            sent += 1

        logger.info(f"ListMovies streamed {sent} movies")

    @grpc_error_handler
    def UpdateMovie(self, request, context):
        movie = Movie.from_proto(request.movie) if request.HasField("movie") else None

        updated = movies_service.update_movie(self.dao, movie)

        return movie_pb.UpdateMovieRes(movie=updated.to_proto())

    @grpc_error_handler
    def DeleteMovie(self, request, context):
        success = movies_service.delete_movie(self.dao, request.id)

        return movie_pb.DeleteMovieRes(success=success)


def add_movie_service_to_server(servicer: MovieServiceServicer, server: grpc.Server):
    rpc_method_handlers = {}
    for rpc_name, (request, response, streaming) in movie_pb.RPC_METHODS.items():
        handler_factory = (
            grpc.unary_stream_rpc_method_handler
            if streaming
            else grpc.unary_unary_rpc_method_handler
        )
        rpc_method_handlers[rpc_name] = handler_factory(
            getattr(servicer, rpc_name),
            request_deserializer=movie_pb.get_message_class(request).FromString,
            response_serializer=movie_pb.get_message_class(response).SerializeToString,
        )

    generic_handler = grpc.method_handlers_generic_handler(
        movie_pb.SERVICE_NAME, rpc_method_handlers
    )
    server.add_generic_rpc_handlers((generic_handler,))


class MovieServiceStub:
    """Client for movie.MovieService."""

    def __init__(self, channel: grpc.Channel):
        for rpc_name, (request, response, streaming) in movie_pb.RPC_METHODS.items():
            callable_factory = channel.unary_stream if streaming else channel.unary_unary
            setattr(
                self,
                rpc_name,
                callable_factory(
                    f"/{movie_pb.SERVICE_NAME}/{rpc_name}",
                    request_serializer=movie_pb.get_message_class(request).SerializeToString,
                    response_deserializer=movie_pb.get_message_class(response).FromString,
                ),
            )
