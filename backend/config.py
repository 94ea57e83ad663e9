import os
from pathlib import Path
from dotenv import load_dotenv

from catalogo.services.env_utils import sanitize_env_value, env_int

load_dotenv()

# Raiz do projeto
PROJECT_ROOT = Path(__file__).parent.parent

class Config:
    """Configuração da aplicação"""

    # Supabase (banco hospedado + storage)
    SUPABASE_URL = sanitize_env_value(os.getenv('SUPABASE_URL'))
    SUPABASE_ANON_KEY = sanitize_env_value(os.getenv('SUPABASE_ANON_KEY'))

    # MongoDB (backend alternativo, imagens no GridFS)
    MONGO_URI = sanitize_env_value(os.getenv('MONGO_URI'))

    # Backend de armazenamento:
    # 1) STORE_BACKEND explícito ('supabase' ou 'mongo')
    # 2) vazio: Supabase se SUPABASE_URL existir, senão MongoDB se MONGO_URI existir
    STORE_BACKEND = sanitize_env_value(os.getenv('STORE_BACKEND')).lower()

    PRODUCTS_TABLE = sanitize_env_value(os.getenv('PRODUCTS_TABLE'), 'produtos')
    IMAGES_BUCKET = sanitize_env_value(os.getenv('IMAGES_BUCKET'), 'imagens-produtos')
    IMAGES_FOLDER = sanitize_env_value(os.getenv('IMAGES_FOLDER'), 'produtos')

    # API
    API_PREFIX = '/api'

    # CORS allowlist (comma-separated origins)
    # Example:
    # CORS_ALLOWED_ORIGINS=https://catalogo.netlify.app,https://www.catalogo.com.br
    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ALLOWED_ORIGINS', '').split(',')
        if origin.strip()
    ]

    # Cliente estático (HTML/CSS/JS)
    STATIC_DIR = os.getenv('STATIC_DIR', str(PROJECT_ROOT / 'public'))

    LOG_LEVEL = sanitize_env_value(os.getenv('LOG_LEVEL'), 'INFO').upper()

    # Servidor de desenvolvimento
    FLASK_DEBUG = sanitize_env_value(os.getenv('FLASK_DEBUG'), 'true').lower() == 'true'
    PORT = env_int('PORT', 5000)
    PORT_FALLBACK = env_int('PORT_FALLBACK', 5001)
