from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the Hroof game server!',
        'poll_interval_sec': float(current_app.config.get('POLL_INTERVAL_SEC', 2)),
    })
