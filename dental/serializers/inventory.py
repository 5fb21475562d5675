from rest_framework import serializers

from dental.models import InventoryItem, StockMovement


class InventoryItemSerializer(serializers.ModelSerializer):
    low_stock = serializers.SerializerMethodField()

    class Meta:
        model = InventoryItem
        fields = ('id', 'name', 'category', 'current_stock', 'unit', 'reorder_level', 'supplier', 'brand',
                  'expiry_date', 'low_stock', 'created_at', 'updated_at')
        read_only_fields = ('id', 'low_stock', 'created_at', 'updated_at')

    def get_low_stock(self, obj):
        return obj.current_stock <= obj.reorder_level


class StockMovementSerializer(serializers.ModelSerializer):
    class Meta:
        model = StockMovement
        fields = ('id', 'item', 'item_name', 'type', 'quantity', 'remaining_stock', 'performed_by', 'reason',
                  'supplier', 'brand', 'expiry_date', 'created_at')
        read_only_fields = fields


class StockMovementCreateSerializer(serializers.Serializer):
    itemId = serializers.IntegerField(min_value=1)
    type = serializers.ChoiceField(choices=StockMovement.TYPE_CHOICES)
    quantity = serializers.IntegerField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)
    supplier = serializers.CharField(max_length=255, required=False, allow_blank=True)
    brand = serializers.CharField(max_length=255, required=False, allow_blank=True)
    expiryDate = serializers.DateField(required=False, allow_null=True)
