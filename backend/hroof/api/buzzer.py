from flask import Blueprint, jsonify, request
from hroof.services import store
from hroof.socketio_events import notify_room


buzzer = Blueprint('buzzer', __name__)


@buzzer.route('/<string:room_id>', methods=['GET'])
def get_buzzer(room_id):
    state = store.fetch_buzzer(room_id)
    if not state:
        return jsonify({'error': 'Buzzer state not found'}), 404
    return jsonify(state.to_dict())


@buzzer.route('/<string:room_id>', methods=['PUT'])
def replace_buzzer(room_id):
    data = request.get_json(silent=True) or {}
    state = store.replace_buzzer(
        room_id,
        data.get('active'),
        buzzed_team=data.get('buzzed_team'),
        buzzed_player=data.get('buzzed_player'),
        buzzed_at=data.get('buzzed_at'),
        expected_version=data.get('expected_version'),
    )
    if not state:
        return jsonify({'error': 'Buzzer state not found'}), 404
    notify_room(state.game_id, 'buzzer')
    return jsonify({'success': True, 'version': state.version})
