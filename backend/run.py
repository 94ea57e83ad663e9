import socket

from catalogo import create_app
from catalogo.logging_utils import get_logger
from config import Config

LOG = get_logger("catalogo.run")

app = create_app(Config)


def _can_bind(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(0.2)
        return sock.connect_ex(("127.0.0.1", port)) != 0


if __name__ == '__main__':
    preferred_port = Config.PORT
    fallback_port = Config.PORT_FALLBACK
    run_port = preferred_port

    if not _can_bind(preferred_port) and fallback_port != preferred_port and _can_bind(fallback_port):
        LOG.warning("⚠ Port %d is in use, fallback to %d", preferred_port, fallback_port)
        run_port = fallback_port

    app.run(debug=Config.FLASK_DEBUG, host='0.0.0.0', port=run_port)
