import django_filters
from django.db.models import Q
from .models import PurchaseOrder, SupplierPayment


class PurchaseOrderFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    status = django_filters.MultipleChoiceFilter(choices=PurchaseOrder.STATUS_CHOICES)
    date_from = django_filters.DateFilter(field_name='order_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='order_date', lookup_expr='lte')

    class Meta:
        model = PurchaseOrder
        fields = ['supplier', 'status']

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(po_number__icontains=value) |
            Q(supplier__name__icontains=value) |
            Q(notes__icontains=value)
        )


class SupplierPaymentFilter(django_filters.FilterSet):
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    purchase_order = django_filters.NumberFilter(field_name='purchase_order_id')
    status = django_filters.MultipleChoiceFilter(choices=SupplierPayment.STATUS_CHOICES)
    payment_method = django_filters.ChoiceFilter(choices=SupplierPayment.PAYMENT_METHOD_CHOICES)
    due_from = django_filters.DateFilter(field_name='due_date', lookup_expr='gte')
    due_to = django_filters.DateFilter(field_name='due_date', lookup_expr='lte')

    class Meta:
        model = SupplierPayment
        fields = ['supplier', 'status', 'payment_method']
