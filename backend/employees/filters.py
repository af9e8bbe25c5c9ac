import django_filters
from .models import Attendance


class AttendanceFilter(django_filters.FilterSet):
    employee = django_filters.NumberFilter(field_name='employee_id')
    status = django_filters.MultipleChoiceFilter(choices=Attendance.STATUS_CHOICES)
    date_from = django_filters.DateFilter(field_name='attendance_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='attendance_date', lookup_expr='lte')

    class Meta:
        model = Attendance
        fields = ['employee', 'status']
