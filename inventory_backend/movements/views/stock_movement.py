# movements/views/stock_movement.py

"""
STOCK MOVEMENT VIEWSET

Endpoints:
- POST /api/stock-movements/                 ADMIN only, 201 + Location
- GET  /api/stock-movements/?product_id=<id>  history, newest first
- GET  /api/stock-movements/<id>/             single movement

Rules:
- The acting user is taken from the authenticated request.
- Domain errors are rendered by common.api.inventory_exception_handler.
"""

import logging

from django.urls import reverse
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.exceptions import InvalidArgumentError
from movements.filters import StockMovementHistoryFilter
from movements.models import StockMovement
from movements.serializers import MovementRecordSerializer, StockMovementRequestSerializer
from movements.services.stock_movement import MovementRequest, StockMovementService
from permissions.roles import CAP_STOCK_HISTORY, CAP_STOCK_MOVE, HasCapability

logger = logging.getLogger(__name__)


class StockMovementViewSet(viewsets.GenericViewSet):
    serializer_class = StockMovementRequestSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        "create": CAP_STOCK_MOVE,
        "list": CAP_STOCK_HISTORY,
        "retrieve": CAP_STOCK_HISTORY,
    }
    queryset = StockMovement.objects.none()
    lookup_value_regex = r"\d+"

    def get_service(self) -> StockMovementService:
        return StockMovementService()

    @extend_schema(
        request=StockMovementRequestSerializer,
        responses={
            201: MovementRecordSerializer,
            400: OpenApiResponse(description="Invalid request / overflow / insufficient stock"),
            403: OpenApiResponse(description="ADMIN role required"),
            404: OpenApiResponse(description="Product not found"),
            409: OpenApiResponse(description="Concurrent modification, retry with fresh data"),
            503: OpenApiResponse(description="Storage failure"),
        },
        description="Register an INBOUND or OUTBOUND stock movement.",
    )
    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        logger.debug("Stock movement request received", extra={"product_id": data["product_id"]})

        record = self.get_service().register_movement(
            MovementRequest(
                product_id=data["product_id"],
                movement_type=data["movement_type"],
                quantity=data["quantity"],
            ),
            user=request.user,
        )

        location = request.build_absolute_uri(
            reverse("movements:stock-movements-detail", kwargs={"pk": record.id})
        )
        return Response(
            MovementRecordSerializer(record).data,
            status=status.HTTP_201_CREATED,
            headers={"Location": location},
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("product_id", int, OpenApiParameter.QUERY, required=True,
                             description="Positive integer product id"),
            OpenApiParameter("movement_type", str, OpenApiParameter.QUERY, required=False,
                             enum=list(StockMovement.MovementType.values),
                             description="Only movements of this kind"),
        ],
        responses={
            200: MovementRecordSerializer(many=True),
            400: OpenApiResponse(description="product_id missing or invalid"),
            404: OpenApiResponse(description="Product not found"),
        },
        description="Movement history of a product, newest first.",
    )
    def list(self, request):
        filterset = StockMovementHistoryFilter(request.query_params, queryset=self.get_queryset())
        if not filterset.is_valid():
            errors = "; ".join(
                f"{field}: {' '.join(messages)}" for field, messages in filterset.errors.items()
            )
            raise InvalidArgumentError(errors)

        cleaned = filterset.form.cleaned_data
        records = self.get_service().list_movements(
            cleaned["product_id"],
            movement_type=cleaned.get("movement_type") or None,
        )
        return Response(MovementRecordSerializer(records, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        responses={
            200: MovementRecordSerializer,
            404: OpenApiResponse(description="Movement not found"),
        },
    )
    def retrieve(self, request, pk=None):
        record = self.get_service().get_movement(int(pk))
        return Response(MovementRecordSerializer(record).data, status=status.HTTP_200_OK)
