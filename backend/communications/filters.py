import django_filters
from .models import CommunicationTemplate, MessageLog, COMMUNICATION_TYPE_CHOICES


class CommunicationTemplateFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(lookup_expr='icontains')
    category = django_filters.ChoiceFilter(choices=CommunicationTemplate.CATEGORY_CHOICES)
    communication_type = django_filters.ChoiceFilter(choices=COMMUNICATION_TYPE_CHOICES)
    is_active = django_filters.BooleanFilter()

    class Meta:
        model = CommunicationTemplate
        fields = ['category', 'communication_type', 'is_active']


class MessageLogFilter(django_filters.FilterSet):
    customer = django_filters.NumberFilter(field_name='customer_id')
    template = django_filters.NumberFilter(field_name='template_id')
    communication_type = django_filters.ChoiceFilter(choices=COMMUNICATION_TYPE_CHOICES)
    status = django_filters.MultipleChoiceFilter(choices=MessageLog.STATUS_CHOICES)
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = MessageLog
        fields = ['customer', 'template', 'communication_type', 'status']
