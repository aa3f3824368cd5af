# products/urls.py

"""
PRODUCTS URLS

Purpose:
- Register catalog routes under /api/products/
- Includes the viewset action:
    /api/products/sync/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import ProductViewSet

app_name = "products"

router = SimpleRouter(trailing_slash=True)

router.register(r"", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
