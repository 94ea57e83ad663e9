from flask import Blueprint

from ..context import get_context

images_bp = Blueprint('images', __name__)


@images_bp.route('/<path:key>', methods=['GET'])
def get_image(key):
    """Serve uma imagem guardada no GridFS (backend mongo)"""
    return get_context().repository.send_image(key)
