from flask import Blueprint, jsonify, request
from hroof.services import store
from hroof.socketio_events import notify_room


players = Blueprint('players', __name__)


@players.route('/<string:room_id>', methods=['GET'])
def list_players(room_id):
    return jsonify([p.to_dict() for p in store.fetch_players(room_id)])


@players.route('', methods=['POST'])
def upsert_player():
    data = request.get_json(silent=True) or {}
    player = store.upsert_player(data.get('game_id'), data.get('username'), data.get('team'))
    if not player:
        return jsonify({'error': 'Game not found'}), 404
    notify_room(player.game_id, 'players')
    return jsonify({'success': True, 'player': player.to_dict()}), 201
