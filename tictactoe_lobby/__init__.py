import logging
import random

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS', '*')
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One coordinator per app; it owns the room and game state
    from tictactoe_lobby.coordinator import LobbyCoordinator
    from tictactoe_lobby.services.games import GameSessionStore
    from tictactoe_lobby.services.rooms import RoomRegistry
    from tictactoe_lobby.socketio_events import SocketIOTransport, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    seed = flask_app.config.get('RANDOM_SEED')
    registry = RoomRegistry(
        dedupe_members=flask_app.config.get('DEDUPE_MEMBERS', False),
        prune_empty_rooms=flask_app.config.get('PRUNE_EMPTY_ROOMS', False),
        logger=flask_app.logger,
    )
    store = GameSessionStore(
        rng=random.Random(seed) if seed is not None else None,
        strict_moves=flask_app.config.get('STRICT_MOVES', False),
        logger=flask_app.logger,
    )
    flask_app.extensions['tictactoe_lobby'] = LobbyCoordinator(
        SocketIOTransport(socketio, namespace=namespace),
        registry=registry,
        store=store,
        logger=flask_app.logger,
    )

    # Register Socket.IO event handlers on the initialized socketio instance
    register_socketio_handlers(namespace=namespace)

    from tictactoe_lobby.api.rooms import rooms
    flask_app.register_blueprint(rooms)

    @click.command('lobby-reset')
    def lobby_reset_command():
        """Forgets every room membership and active game."""
        flask_app.extensions['tictactoe_lobby'].reset()
        click.echo('Lobby state has been reset!')

    flask_app.cli.add_command(lobby_reset_command)

    return flask_app
