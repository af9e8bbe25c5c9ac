import django_filters
from django.db.models import Q
from .models import Order, Task
from .constants import GARMENT_TYPE_CHOICES, ORDER_TYPE_CHOICES, PRIORITY_CHOICES
from .workflow import STAGE_CHOICES


class OrderFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    status = django_filters.MultipleChoiceFilter(choices=STAGE_CHOICES)
    priority = django_filters.ChoiceFilter(choices=PRIORITY_CHOICES)
    garment_type = django_filters.ChoiceFilter(choices=GARMENT_TYPE_CHOICES)
    order_type = django_filters.ChoiceFilter(choices=ORDER_TYPE_CHOICES)
    customer = django_filters.NumberFilter(field_name='customer_id')
    is_urgent = django_filters.BooleanFilter()
    date_from = django_filters.DateFilter(field_name='order_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='order_date', lookup_expr='lte')
    delivery_from = django_filters.DateFilter(field_name='delivery_date', lookup_expr='gte')
    delivery_to = django_filters.DateFilter(field_name='delivery_date', lookup_expr='lte')

    class Meta:
        model = Order
        fields = ['status', 'priority', 'garment_type', 'order_type', 'customer', 'is_urgent']

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(order_number__icontains=value) |
            Q(customer__first_name__icontains=value) |
            Q(customer__last_name__icontains=value) |
            Q(customer__phone__icontains=value)
        )


class TaskFilter(django_filters.FilterSet):
    order = django_filters.NumberFilter(field_name='order_id')
    stage = django_filters.ChoiceFilter(choices=STAGE_CHOICES)
    status = django_filters.MultipleChoiceFilter(choices=Task.STATUS_CHOICES)
    assigned_employee = django_filters.NumberFilter(field_name='assigned_employee_id')
    priority = django_filters.ChoiceFilter(choices=PRIORITY_CHOICES)
    unassigned = django_filters.BooleanFilter(field_name='assigned_employee', lookup_expr='isnull')
    deadline_before = django_filters.IsoDateTimeFilter(field_name='deadline', lookup_expr='lte')

    class Meta:
        model = Task
        fields = ['order', 'stage', 'status', 'assigned_employee', 'priority']
