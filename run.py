from dotenv import load_dotenv

load_dotenv()

from tictactoe_lobby import create_app, socketio  # noqa: E402

app = create_app()

if __name__ == '__main__':
    app.logger.info(f"Server running at port : {app.config['PORT']}")
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=True)
