# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Catalog endpoints (paged list, detail, create, update, delete)
- External catalog sync (FakeStore)

Rules:
- Views parse + validate input, services own business rules.
- Domain errors are rendered by common.api.inventory_exception_handler.
"""

from django.urls import reverse
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.exceptions import InvalidArgumentError
from permissions.roles import (
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_SYNC,
    CAP_INVENTORY_VIEW,
    HasCapability,
)
from products.models import Product
from products.serializers import (
    ProductPageSerializer,
    ProductSerializer,
    SyncResultSerializer,
)
from products.services import catalog
from products.services.catalog_sync import sync_from_fakestore


def _int_param(request, name: str, default: int) -> int:
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgumentError(f"{name} must be an integer")


class ProductViewSet(viewsets.GenericViewSet):
    """
    Product endpoints.

    - GET    /api/products/?search=&category=&page=0&size=10&sort_by=created_at&sort_dir=desc
    - GET    /api/products/<id>/
    - POST   /api/products/
    - PUT    /api/products/<id>/
    - DELETE /api/products/<id>/
    - POST   /api/products/sync/
    """

    serializer_class = ProductSerializer
    queryset = Product.objects.none()
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        "list": CAP_INVENTORY_VIEW,
        "retrieve": CAP_INVENTORY_VIEW,
        "create": CAP_INVENTORY_EDIT,
        "update": CAP_INVENTORY_EDIT,
        "destroy": CAP_INVENTORY_EDIT,
        "sync": CAP_INVENTORY_SYNC,
    }
    lookup_value_regex = r"\d+"

    @extend_schema(
        parameters=[
            OpenApiParameter("search", str, OpenApiParameter.QUERY, required=False,
                             description="Case-insensitive name match"),
            OpenApiParameter("category", str, OpenApiParameter.QUERY, required=False,
                             description="Case-insensitive category match"),
            OpenApiParameter("page", int, OpenApiParameter.QUERY, required=False,
                             description="0-based page index (default 0)"),
            OpenApiParameter("size", int, OpenApiParameter.QUERY, required=False,
                             description="Page size, clamped to 1..100 (default 10)"),
            OpenApiParameter("sort_by", str, OpenApiParameter.QUERY, required=False,
                             description="id, name, category, supplier, unit_price, stock, created_at"),
            OpenApiParameter("sort_dir", str, OpenApiParameter.QUERY, required=False,
                             description="desc (default) or asc"),
        ],
        responses={200: ProductPageSerializer},
    )
    def list(self, request):
        page = catalog.list_products(
            search=request.query_params.get("search"),
            category=request.query_params.get("category"),
            page=_int_param(request, "page", 0),
            size=_int_param(request, "size", catalog.DEFAULT_PAGE_SIZE),
            sort_by=(request.query_params.get("sort_by") or catalog.DEFAULT_SORT_FIELD).strip(),
            sort_dir=request.query_params.get("sort_dir") or catalog.DEFAULT_SORT_DIR,
        )
        return Response(ProductPageSerializer(page).data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: ProductSerializer, 404: OpenApiResponse(description="Not found")})
    def retrieve(self, request, pk=None):
        product = catalog.get_product(int(pk))
        return Response(self.get_serializer(product).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=ProductSerializer,
        responses={
            201: ProductSerializer,
            400: OpenApiResponse(description="Validation error"),
            409: OpenApiResponse(description="Duplicate product name"),
        },
    )
    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = catalog.create_product(
            name=data["name"],
            category=data["category"],
            supplier=data.get("supplier"),
            unit_price=data["unit_price"],
            stock=data["stock"],
        )

        location = request.build_absolute_uri(
            reverse("products:products-detail", kwargs={"pk": product.pk})
        )
        return Response(
            self.get_serializer(product).data,
            status=status.HTTP_201_CREATED,
            headers={"Location": location},
        )

    @extend_schema(
        request=ProductSerializer,
        responses={
            200: ProductSerializer,
            404: OpenApiResponse(description="Not found"),
            409: OpenApiResponse(description="Duplicate name or concurrent modification"),
        },
    )
    def update(self, request, pk=None):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = catalog.update_product(
            int(pk),
            name=data["name"],
            category=data["category"],
            supplier=data.get("supplier"),
            unit_price=data["unit_price"],
            stock=data["stock"],
            version=data.get("version"),
        )
        return Response(self.get_serializer(product).data, status=status.HTTP_200_OK)

    @extend_schema(
        responses={
            204: OpenApiResponse(description="Deleted"),
            404: OpenApiResponse(description="Not found"),
            409: OpenApiResponse(description="Product has stock movement history"),
        },
    )
    def destroy(self, request, pk=None):
        catalog.delete_product(int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=None,
        responses={200: SyncResultSerializer},
        description="Import products from the FakeStore catalog that do not exist yet.",
    )
    @action(detail=False, methods=["post"], url_path="sync")
    def sync(self, request):
        total = sync_from_fakestore()

        if total == 0:
            message = "Sync completed. No new products to insert."
        else:
            message = f"Sync completed successfully. Total inserted: {total}"

        return Response(
            SyncResultSerializer({"total_synced": total, "message": message}).data,
            status=status.HTTP_200_OK,
        )
