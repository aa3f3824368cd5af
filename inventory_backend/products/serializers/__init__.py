from .product import ProductPageSerializer, ProductSerializer, SyncResultSerializer

__all__ = ["ProductSerializer", "ProductPageSerializer", "SyncResultSerializer"]
