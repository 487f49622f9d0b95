import os

from hroof import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # SocketIO's server carries both the REST API and the /ws push channel
    socketio.run(
        app,
        host=os.environ.get('HOST', '127.0.0.1'),
        port=int(os.environ.get('PORT', '5000')),
        debug=os.environ.get('DEBUG', 'false').lower() == 'true',
    )
