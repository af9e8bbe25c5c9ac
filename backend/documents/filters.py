import django_filters
from django.db.models import Q
from .models import Document, CATEGORY_CHOICES


class DocumentFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.ChoiceFilter(choices=CATEGORY_CHOICES)
    type = django_filters.ChoiceFilter(choices=Document.TYPE_CHOICES)
    is_archived = django_filters.BooleanFilter()
    is_public = django_filters.BooleanFilter()
    requires_approval = django_filters.BooleanFilter()
    tag = django_filters.CharFilter(method='filter_tag')
    related_entity_type = django_filters.CharFilter()
    related_entity_id = django_filters.CharFilter()
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Document
        fields = ['category', 'type', 'is_archived', 'is_public', 'requires_approval']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))

    def filter_tag(self, queryset, name, value):
        # JSONField __contains is unsupported on SQLite
        ids = [doc.id for doc in queryset.only('id', 'tags') if value in (doc.tags or [])]
        return queryset.filter(id__in=ids)
