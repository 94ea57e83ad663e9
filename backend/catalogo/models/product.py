from typing import Any, Dict, Optional

# Colunas da tabela "produtos"
FIELD_ID = 'id'
FIELD_NAME = 'nome'
FIELD_CATEGORY = 'categoria'
FIELD_DESCRIPTION = 'descricao'
FIELD_PRICE = 'preco'
FIELD_STORE = 'loja'
FIELD_IMAGE_URL = 'imagem_url'
FIELD_LINK = 'link'

# Campos do formulário de cadastro, repassados sem validação
FORM_FIELDS = (
    FIELD_NAME,
    FIELD_CATEGORY,
    FIELD_DESCRIPTION,
    FIELD_PRICE,
    FIELD_STORE,
    FIELD_LINK,
)

# Campo multipart com o arquivo da imagem
IMAGE_FIELD = 'imagem'


class Product:
    """Produto persistido"""

    KNOWN_FIELDS = (FIELD_ID,) + FORM_FIELDS + (FIELD_IMAGE_URL,)

    def __init__(self, name, category, description, price, store, image_url, link,
                 id=None, extra=None):
        self.id = id  # atribuído pelo store
        self.name = name
        self.category = category
        self.description = description
        self.price = price  # string ou número, repassado como veio
        self.store = store
        self.image_url = image_url
        self.link = link
        # Colunas extras do store (ex.: created_at) são preservadas
        self.extra = dict(extra or {})

    def to_dict(self):
        """Converte para o formato de linha/JSON"""
        data = dict(self.extra)
        if self.id is not None:
            data[FIELD_ID] = self.id
        data.update({
            FIELD_NAME: self.name,
            FIELD_CATEGORY: self.category,
            FIELD_DESCRIPTION: self.description,
            FIELD_PRICE: self.price,
            FIELD_STORE: self.store,
            FIELD_IMAGE_URL: self.image_url,
            FIELD_LINK: self.link,
        })
        return data

    @staticmethod
    def from_dict(data):
        """Cria um produto a partir de uma linha do store"""
        return Product(
            id=data.get(FIELD_ID),
            name=data.get(FIELD_NAME),
            category=data.get(FIELD_CATEGORY),
            description=data.get(FIELD_DESCRIPTION),
            price=data.get(FIELD_PRICE),
            store=data.get(FIELD_STORE),
            image_url=data.get(FIELD_IMAGE_URL),
            link=data.get(FIELD_LINK),
            extra={k: v for k, v in data.items() if k not in Product.KNOWN_FIELDS},
        )


class ProductSubmission:
    """Campos do formulário de cadastro (todos opcionais)"""

    def __init__(self, name=None, category=None, description=None, price=None,
                 store=None, link=None):
        self.name = name
        self.category = category
        self.description = description
        self.price = price
        self.store = store
        self.link = link

    @staticmethod
    def from_form(form) -> 'ProductSubmission':
        return ProductSubmission(
            name=form.get(FIELD_NAME),
            category=form.get(FIELD_CATEGORY),
            description=form.get(FIELD_DESCRIPTION),
            price=form.get(FIELD_PRICE),
            store=form.get(FIELD_STORE),
            link=form.get(FIELD_LINK),
        )

    def to_product(self, image_url: str) -> Product:
        return Product(
            name=self.name,
            category=self.category,
            description=self.description,
            price=self.price,
            store=self.store,
            image_url=image_url,
            link=self.link,
        )


class ImageUpload:
    """Arquivo de imagem recebido no cadastro"""

    DEFAULT_CONTENT_TYPE = 'application/octet-stream'

    def __init__(self, filename: str, data: bytes, content_type: Optional[str] = None):
        self.filename = filename
        self.data = data
        self.content_type = content_type or self.DEFAULT_CONTENT_TYPE

    @staticmethod
    def from_file_storage(file_storage) -> Optional['ImageUpload']:
        """Lê um ``werkzeug.FileStorage``; parte sem nome de arquivo conta como ausente."""
        if file_storage is None or not file_storage.filename:
            return None
        return ImageUpload(
            filename=file_storage.filename,
            data=file_storage.read(),
            content_type=file_storage.mimetype,
        )

    @property
    def basename(self) -> str:
        # Clientes Windows podem mandar o caminho completo
        return self.filename.replace('\\', '/').rsplit('/', 1)[-1]

    def describe(self) -> Dict[str, Any]:
        return {'filename': self.filename, 'content_type': self.content_type, 'size': len(self.data)}
