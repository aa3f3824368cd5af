# movements/filters.py

import django_filters
from django import forms

from movements.models import StockMovement


class StockMovementHistoryFilter(django_filters.FilterSet):
    """
    Query params for GET /api/stock-movements/

    - product_id (required, positive integer; "1.7" or "-1" are rejected)
    - movement_type (optional: INBOUND / OUTBOUND)
    """

    product_id = django_filters.Filter(
        field_name="product_id",
        field_class=forms.IntegerField,
        min_value=1,
        required=True,
    )
    movement_type = django_filters.ChoiceFilter(
        field_name="movement_type",
        choices=StockMovement.MovementType.choices,
    )

    class Meta:
        model = StockMovement
        fields = ["product_id", "movement_type"]
