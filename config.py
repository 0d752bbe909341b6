import os


def _env_bool(name, default='false'):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


def _env_origins(name, default='*'):
    raw = os.environ.get(name, default).strip()
    if raw == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '5000'))
    # Comma-separated list, or * for any origin
    CORS_ALLOWED_ORIGINS = _env_origins('CORS_ALLOWED_ORIGINS')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Room policies: keep duplicate member entries / keep rooms once empty
    DEDUPE_MEMBERS = _env_bool('DEDUPE_MEMBERS')
    PRUNE_EMPTY_ROOMS = _env_bool('PRUNE_EMPTY_ROOMS')
    # Reject off-board moves, occupied cells and turns after the game is over
    STRICT_MOVES = _env_bool('STRICT_MOVES')
    # Optional: fixed seed for player/symbol selection. Unset means random.
    RANDOM_SEED = int(os.environ['RANDOM_SEED']) if os.environ.get('RANDOM_SEED') else None
