import os

from flask import Flask
from flask_cors import CORS

from .context import EXTENSION_KEY, CatalogContext
from .logging_utils import get_logger, set_level
from .services.product_repository import ProductRepository, create_repository
from .services.product_service import ProductService

LOG = get_logger(__name__)


def create_app(config_object=None, repository: ProductRepository = None):
    """Cria a aplicação Flask

    ``repository`` injeta o store explicitamente (testes); sem ele o backend é
    escolhido pela configuração.
    """
    if config_object is None:
        from config import Config
        config_object = Config

    static_dir = getattr(config_object, 'STATIC_DIR', None)
    has_static = bool(static_dir) and os.path.isdir(static_dir)
    app = Flask(
        __name__,
        static_folder=static_dir if has_static else None,
        static_url_path='',
    )
    app.config.from_object(config_object)
    set_level(__name__, app.config.get('LOG_LEVEL', 'INFO'))

    # CORS: use explicit allowlist in production when provided.
    cors_origins = app.config.get('CORS_ALLOWED_ORIGINS', [])
    if cors_origins:
        CORS(app, resources={r"/api/*": {"origins": cors_origins}})
    else:
        CORS(app, resources={r"/api/*": {"origins": "*"}})

    if repository is None:
        repository = create_repository(app)
    app.extensions[EXTENSION_KEY] = CatalogContext(
        repository=repository,
        products=ProductService(repository, images_folder=app.config.get('IMAGES_FOLDER', 'produtos')),
    )

    # Blueprints
    from .routes.products import products_bp
    api_prefix = app.config.get('API_PREFIX', '/api')
    app.register_blueprint(products_bp, url_prefix=api_prefix)

    if repository.serves_images:
        from .routes.images import images_bp
        app.register_blueprint(images_bp, url_prefix=f"{api_prefix}/imagens")

    # Cliente estático (public/index.html)
    if has_static:
        LOG.info("Serving static client from %s", static_dir)

        @app.route('/')
        def index():
            return app.send_static_file('index.html')
    else:
        LOG.warning("Static client not found at %s; running API only.", static_dir)

    return app
