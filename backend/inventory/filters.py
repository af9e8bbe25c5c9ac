import django_filters
from django.db.models import Q
from .models import Fabric, InventoryItem, MaterialUsage, Waste


class FabricFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.ChoiceFilter(choices=Fabric.CATEGORY_CHOICES)
    is_active = django_filters.BooleanFilter()
    min_price = django_filters.NumberFilter(field_name='price_per_meter', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price_per_meter', lookup_expr='lte')

    class Meta:
        model = Fabric
        fields = ['category', 'is_active']

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value) | Q(color__icontains=value) | Q(material__icontains=value)
        )


class InventoryItemFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.ChoiceFilter(choices=InventoryItem.CATEGORY_CHOICES)
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    is_active = django_filters.BooleanFilter()

    class Meta:
        model = InventoryItem
        fields = ['category', 'supplier', 'is_active']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(sku__icontains=value))


class MaterialUsageFilter(django_filters.FilterSet):
    order = django_filters.NumberFilter(field_name='order_id')
    inventory_item = django_filters.NumberFilter(field_name='inventory_item_id')
    date_from = django_filters.DateFilter(field_name='usage_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='usage_date', lookup_expr='lte')

    class Meta:
        model = MaterialUsage
        fields = ['order', 'inventory_item']


class WasteFilter(django_filters.FilterSet):
    order = django_filters.NumberFilter(field_name='order_id')
    inventory_item = django_filters.NumberFilter(field_name='inventory_item_id')
    reason = django_filters.ChoiceFilter(choices=Waste.REASON_CHOICES)
    date_from = django_filters.DateFilter(field_name='waste_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='waste_date', lookup_expr='lte')

    class Meta:
        model = Waste
        fields = ['order', 'inventory_item', 'reason']
