# movements/urls.py

"""
STOCK LEDGER URLS

Routes under /api/stock-movements/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from movements.views import StockMovementViewSet

app_name = "movements"

router = SimpleRouter(trailing_slash=True)

router.register(r"", StockMovementViewSet, basename="stock-movements")

urlpatterns = [
    path("", include(router.urls)),
]
