# movements/serializers/stock_movement.py

"""
STOCK MOVEMENT SERIALIZERS

Input is only type-coerced here. Range and business rules are enforced by
StockMovementService so every rejection carries a stable error code.
"""

from rest_framework import serializers

from movements.models import StockMovement


class StockMovementRequestSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    movement_type = serializers.CharField(
        help_text="INBOUND or OUTBOUND",
        trim_whitespace=True,
    )
    quantity = serializers.IntegerField(help_text="1..1,000,000")


class MovementRecordSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(read_only=True)
    movement_type = serializers.ChoiceField(
        choices=StockMovement.MovementType.choices, read_only=True
    )
    quantity = serializers.IntegerField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    user_id = serializers.UUIDField(read_only=True, allow_null=True)
    stock_before = serializers.IntegerField(read_only=True)
    stock_after = serializers.IntegerField(read_only=True)
