from flask import Blueprint, jsonify, request

from ..context import get_context
from ..errors import CatalogError
from ..logging_utils import get_logger
from ..models.product import IMAGE_FIELD, ImageUpload, ProductSubmission
from ..services.product_filters import FilterCriteria

LOG = get_logger(__name__)

products_bp = Blueprint('products', __name__)

MSG_SERVER_ERROR = 'Erro no servidor.'


@products_bp.route('/produtos', methods=['GET'])
def list_products():
    """Lista produtos, com filtros por categoria, loja e termo

    Parâmetros de query:
    - categoria, loja: filtro exato (ou substring com fuzzy=true)
    - termo: busca em nome ou descricao
    - fuzzy: 'true' liga a busca parcial de categoria e loja
    - page, limit: paginação (padrão 1 e 1000, limit máximo 1000)
    - orderBy: aceito, mas a ordenação é sempre por nome
    """
    criteria = FilterCriteria.from_args(request.args)
    try:
        products = get_context().products.list_products(criteria)
        return jsonify(products), 200
    except CatalogError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        LOG.exception("Erro no servidor ao listar produtos")
        return jsonify({'error': MSG_SERVER_ERROR}), 500


@products_bp.route('/cadastrar-produto', methods=['POST'])
def create_product():
    """Cadastra um produto com upload de imagem (multipart/form-data)"""
    try:
        submission = ProductSubmission.from_form(request.form)
        image = ImageUpload.from_file_storage(request.files.get(IMAGE_FIELD))
        message = get_context().products.create_product(submission, image)
        return jsonify({'message': message}), 201
    except CatalogError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        LOG.exception("Erro no servidor ao cadastrar produto")
        return jsonify({'error': MSG_SERVER_ERROR}), 500
