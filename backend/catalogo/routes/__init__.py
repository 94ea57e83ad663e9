# Blueprints: products.py (API de produtos), images.py (imagens do GridFS)
