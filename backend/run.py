import os
from app import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # SocketIO server runs decay ticks and smite resolutions as background tasks
    socketio.run(app, host=os.environ.get('HOST', '127.0.0.1'), port=int(os.environ.get('PORT', '5000')), debug=True)
