import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.permissions import IsManagerOrAdmin, IsAdminRole, is_manager_or_admin
from backend.core.utils import create_audit_log, get_client_ip
from .models import Employee, Bonus, Payroll, Attendance
from .serializers import (
    EmployeeSerializer, BonusSerializer, PayrollSerializer, PayrollGenerateSerializer,
    AttendanceSerializer, ClockSerializer,
)
from .filters import AttendanceFilter
from .attendance import clock_in, clock_out, clock_status, AttendanceError
from .payroll import generate_payroll, generate_bulk_payrolls, PayrollError
from .payslip import render_payslip_pdf, render_payslip_html

logger = logging.getLogger(__name__)


# Employee views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def employee_list_create(request):
    """List employees or create a new employee"""
    if request.method == 'GET':
        queryset = Employee.objects.all()
        search = request.query_params.get('search', None)
        role = request.query_params.get('role', None)
        is_active = request.query_params.get('is_active', None)
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search) |
                Q(employee_number__icontains=search) |
                Q(phone__icontains=search)
            )
        if role:
            queryset = queryset.filter(role=role)
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() in ('true', '1'))
        return paginated_response(request, queryset, EmployeeSerializer, default_limit=10)
    else:
        serializer = EmployeeSerializer(data=request.data)
        if serializer.is_valid():
            employee = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Employee',
                object_id=employee.id,
                object_name=employee.full_name,
                object_reference=employee.employee_number,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def employee_detail(request, pk):
    """Retrieve, update or deactivate an employee"""
    employee = get_object_or_404(Employee, pk=pk)

    if request.method == 'GET':
        return Response(EmployeeSerializer(employee).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = EmployeeSerializer(employee, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Employee',
                object_id=employee.id,
                object_name=employee.full_name,
                object_reference=employee.employee_number,
                changes={k: str(v) for k, v in serializer.validated_data.items()},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        employee.is_active = False
        employee.save(update_fields=['is_active', 'updated_at'])
        create_audit_log(
            request=request,
            action='delete',
            model_name='Employee',
            object_id=employee.id,
            object_name=employee.full_name,
            object_reference=employee.employee_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


# Bonus views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def bonus_list_create(request):
    if request.method == 'GET':
        queryset = Bonus.objects.select_related('employee')
        for param in ('employee', 'period', 'status'):
            value = request.query_params.get(param, None)
            if value:
                queryset = queryset.filter(**{param: value})
        return Response(BonusSerializer(queryset, many=True).data)
    else:
        serializer = BonusSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def bonus_detail(request, pk):
    bonus = get_object_or_404(Bonus, pk=pk)

    if request.method == 'GET':
        return Response(BonusSerializer(bonus).data)
    elif request.method == 'PATCH':
        serializer = BonusSerializer(bonus, data=request.data, partial=True)
        if serializer.is_valid():
            new_status = serializer.validated_data.get('status')
            if new_status == 'APPROVED' and bonus.status != 'APPROVED':
                serializer.save(approved_by=request.user)
            else:
                serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if bonus.status == 'PAID':
            return Response({'error': 'Paid bonuses cannot be deleted'}, status=status.HTTP_400_BAD_REQUEST)
        bonus.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Payroll views
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def payroll_list(request):
    queryset = Payroll.objects.select_related('employee')
    for param in ('employee', 'period', 'period_type', 'status'):
        value = request.query_params.get(param, None)
        if value:
            queryset = queryset.filter(**{param: value})
    return paginated_response(request, queryset, PayrollSerializer, default_limit=20)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def payroll_detail(request, pk):
    payroll = get_object_or_404(Payroll.objects.select_related('employee'), pk=pk)

    if request.method == 'GET':
        return Response(PayrollSerializer(payroll).data)
    elif request.method == 'PATCH':
        if payroll.status == 'PAID':
            return Response({'error': 'Paid payrolls cannot be modified'}, status=status.HTTP_400_BAD_REQUEST)
        serializer = PayrollSerializer(payroll, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if payroll.status != 'DRAFT':
            return Response({'error': 'Only draft payrolls can be deleted'}, status=status.HTTP_400_BAD_REQUEST)
        payroll.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def payroll_generate(request):
    """Generate a payroll for one employee"""
    serializer = PayrollGenerateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    if not data.get('employee'):
        return Response({'employee': ['This field is required.']}, status=status.HTTP_400_BAD_REQUEST)

    try:
        payroll = generate_payroll(
            data['employee'], data['period'], data['period_type'], data['start_date'], data['end_date'],
            overtime_pay=data.get('overtime_pay'), commission_pay=data.get('commission_pay'),
            user=request.user,
        )
    except PayrollError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='payroll_generate',
        model_name='Payroll',
        object_id=payroll.id,
        object_name=payroll.employee.full_name,
        object_reference=payroll.period,
        changes={'net_pay': str(payroll.net_pay)},
    )
    return Response(PayrollSerializer(payroll).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def payroll_generate_bulk(request):
    """Generate payrolls for a list of employees (all active employees by default)"""
    serializer = PayrollGenerateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    employee_ids = data.get('employees') or list(Employee.objects.filter(is_active=True).values_list('id', flat=True))

    generated, errors = generate_bulk_payrolls(
        employee_ids, data['period'], data['period_type'], data['start_date'], data['end_date'],
        user=request.user,
    )
    return Response({
        'generated': PayrollSerializer(generated, many=True).data,
        'errors': errors,
        'summary': {
            'requested': len(employee_ids),
            'generated': len(generated),
            'failed': len(errors),
        },
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def payroll_payslip_pdf(request, pk):
    payroll = get_object_or_404(Payroll.objects.select_related('employee'), pk=pk)
    pdf = render_payslip_pdf(payroll)
    response = HttpResponse(pdf, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="payslip-{payroll.employee.employee_number}-{payroll.period}.pdf"'
    return response


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def payroll_payslip_html(request, pk):
    payroll = get_object_or_404(Payroll.objects.select_related('employee'), pk=pk)
    return HttpResponse(render_payslip_html(payroll), content_type='text/html')


# Attendance views
def _can_clock_for(user, employee):
    return is_manager_or_admin(user) or (employee.user_id is not None and employee.user_id == user.id)


def _clock(request, pk, action):
    employee = get_object_or_404(Employee, pk=pk, is_active=True)
    if not _can_clock_for(request.user, employee):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    serializer = ClockSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        if action == 'clock_in':
            attendance = clock_in(
                employee, location=data.get('location', ''), ip_address=get_client_ip(request), notes=data.get('notes', ''),
            )
        else:
            attendance = clock_out(employee, location=data.get('location', ''), notes=data.get('notes', ''))
    except AttendanceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(
        request=request,
        action='create' if action == 'clock_in' else 'update',
        model_name='Attendance',
        object_id=attendance.id,
        object_name=employee.full_name,
        object_reference=str(attendance.attendance_date),
        changes={'action': action},
    )
    return Response(
        AttendanceSerializer(attendance).data,
        status=status.HTTP_201_CREATED if action == 'clock_in' else status.HTTP_200_OK,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def employee_clock_in(request, pk):
    """Clock an employee in; staff may clock themselves, managers anyone"""
    return _clock(request, pk, 'clock_in')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def employee_clock_out(request, pk):
    return _clock(request, pk, 'clock_out')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def employee_clock_status(request, pk):
    employee = get_object_or_404(Employee, pk=pk)
    if not _can_clock_for(request.user, employee):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    state = clock_status(employee)
    attendance = state.pop('attendance')
    state['attendance'] = AttendanceSerializer(attendance).data if attendance else None
    return Response(state)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def employee_attendance_list(request, pk):
    """Attendance history for one employee, newest first"""
    employee = get_object_or_404(Employee, pk=pk)
    if not _can_clock_for(request.user, employee):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    queryset = AttendanceFilter(request.query_params, queryset=employee.attendance.select_related('employee')).qs
    return paginated_response(request, queryset, AttendanceSerializer, default_limit=31)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManagerOrAdmin])
def attendance_list(request):
    queryset = AttendanceFilter(request.query_params, queryset=Attendance.objects.select_related('employee')).qs
    return paginated_response(request, queryset, AttendanceSerializer, default_limit=50)
