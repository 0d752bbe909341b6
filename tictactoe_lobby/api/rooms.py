from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


def _coordinator():
    return current_app.extensions['tictactoe_lobby']


@rooms.route('/')
def index():
    return jsonify({'message': 'Welcome to the tic-tac-toe lobby server!'})


@rooms.route('/api/rooms', methods=['GET'])
def list_rooms():
    """
    Returns the same all-rooms snapshot that is broadcast on broadcast-rooms.
    """
    return jsonify(_coordinator().rooms_snapshot())


@rooms.route('/api/rooms/<string:room_code>/game', methods=['GET'])
def get_game(room_code):
    session = _coordinator().store.get(room_code)
    if session is None:
        return jsonify({'error': f'No active game in room {room_code}'}), 404
    return jsonify(session.to_dict())
