import django_filters
from django.db.models import Q
from .models import Customer, Supplier


class CustomerFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    gender = django_filters.ChoiceFilter(choices=Customer.GENDER_CHOICES)
    preferred_contact_method = django_filters.ChoiceFilter(choices=Customer.CONTACT_METHOD_CHOICES)
    is_active = django_filters.BooleanFilter()
    city = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Customer
        fields = ['gender', 'preferred_contact_method', 'is_active', 'city']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(first_name__icontains=value) |
            Q(last_name__icontains=value) |
            Q(email__icontains=value) |
            Q(phone__icontains=value) |
            Q(customer_number__icontains=value)
        )


class SupplierFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    status = django_filters.ChoiceFilter(choices=Supplier.STATUS_CHOICES)
    payment_terms = django_filters.ChoiceFilter(choices=Supplier.PAYMENT_TERMS_CHOICES)
    is_active = django_filters.BooleanFilter()

    class Meta:
        model = Supplier
        fields = ['status', 'payment_terms', 'is_active']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(supplier_number__icontains=value) |
            Q(contact_person__icontains=value) |
            Q(email__icontains=value) |
            Q(phone__icontains=value)
        )
