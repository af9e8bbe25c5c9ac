import django_filters
from .models import AuditLog, Event


class AuditLogFilter(django_filters.FilterSet):
    action = django_filters.CharFilter()
    model = django_filters.CharFilter(field_name='model_name')
    object_id = django_filters.CharFilter()
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = ['action', 'object_id']


class EventFilter(django_filters.FilterSet):
    """Clients poll the feed with ?since=<iso timestamp>"""
    type = django_filters.CharFilter()
    entity_type = django_filters.CharFilter()
    entity_id = django_filters.CharFilter()
    since = django_filters.IsoDateTimeFilter(field_name='timestamp', lookup_expr='gt')

    class Meta:
        model = Event
        fields = ['type', 'entity_type', 'entity_id']
