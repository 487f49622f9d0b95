from flask import Blueprint, jsonify, request
from hroof.services import store
from hroof.socketio_events import notify_room, end_room


games = Blueprint('games', __name__)


@games.route('', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    game = store.create_game(data.get('green_team_name'), data.get('red_team_name'))
    return jsonify(game.to_dict()), 201


@games.route('/<string:room_id>', methods=['GET'])
def get_game(room_id):
    game = store.fetch_game(room_id)
    if not game:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(game.to_dict())


@games.route('/<string:room_id>', methods=['PUT'])
def replace_game(room_id):
    data = request.get_json(silent=True) or {}
    game = store.replace_game(
        room_id,
        data.get('current_state'),
        data.get('current_team'),
        data.get('winner'),
        expected_version=data.get('expected_version'),
    )
    if not game:
        return jsonify({'error': 'Game not found'}), 404
    notify_room(game.id, 'game')
    return jsonify({'success': True, 'version': game.version})


@games.route('/<string:room_id>', methods=['DELETE'])
def delete_game(room_id):
    room_id = room_id.strip()
    deleted = store.delete_game(room_id)
    if deleted:
        end_room(room_id)
    return jsonify({'success': True, 'deleted': deleted})
