"""Clock-in / clock-out and worked-hours calculation for employee attendance"""
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from django.db import transaction
from django.utils import timezone

from backend.core.utils import get_setting
from .models import Attendance

logger = logging.getLogger(__name__)

DEFAULT_WORK_HOURS = Decimal('8')


class AttendanceError(Exception):
    pass


def _standard_hours():
    raw = get_setting('standard_work_hours', DEFAULT_WORK_HOURS)
    try:
        hours = Decimal(str(raw))
    except (InvalidOperation, TypeError):
        logger.warning(f"Invalid standard_work_hours setting {raw!r}, using {DEFAULT_WORK_HOURS}")
        return DEFAULT_WORK_HOURS
    return hours if hours > 0 else DEFAULT_WORK_HOURS


def _work_start():
    raw = get_setting('work_start_time', '')
    if not raw:
        return None
    try:
        return datetime.strptime(str(raw), '%H:%M').time()
    except ValueError:
        logger.warning(f"Invalid work_start_time setting {raw!r}, lateness not tracked")
        return None


def split_hours(clock_in_time, clock_out_time, standard_hours=None):
    """Worked time as (regular, overtime) hours, two decimal places"""
    standard_hours = standard_hours or _standard_hours()
    worked = Decimal((clock_out_time - clock_in_time).total_seconds()) / Decimal('3600')
    worked = worked.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    regular = min(worked, standard_hours)
    return regular, worked - regular


def open_attendance(employee):
    return Attendance.objects.filter(
        employee=employee, clock_in_time__isnull=False, clock_out_time__isnull=True
    ).order_by('-clock_in_time').first()


def clock_status(employee, now=None):
    now = now or timezone.now()
    today = Attendance.objects.filter(employee=employee, attendance_date=timezone.localdate(now)).first()
    current = open_attendance(employee)
    return {
        'attendance': today,
        'is_clocked_in': current is not None,
        'can_clock_in': current is None and today is None,
        'can_clock_out': current is not None,
    }


def clock_in(employee, now=None, location='', ip_address=None, notes=''):
    """Open today's attendance record. One record per employee per day."""
    now = now or timezone.now()
    attendance_date = timezone.localdate(now)
    with transaction.atomic():
        if open_attendance(employee) is not None:
            raise AttendanceError(f"{employee.full_name} is already clocked in")
        if Attendance.objects.select_for_update().filter(employee=employee, attendance_date=attendance_date).exists():
            raise AttendanceError(f"{employee.full_name} already has attendance for {attendance_date}")

        start = _work_start()
        is_late = start is not None and timezone.localtime(now).time() > start
        attendance = Attendance.objects.create(
            employee=employee,
            attendance_date=attendance_date,
            clock_in_time=now,
            status='LATE' if is_late else 'PRESENT',
            location_in=location or '',
            ip_address=ip_address,
            notes=notes or '',
        )
    logger.info(f"{employee.employee_number} clocked in at {now.isoformat()}")
    return attendance


def clock_out(employee, now=None, location='', notes=''):
    """Close the open attendance record and work out regular and overtime hours"""
    now = now or timezone.now()
    with transaction.atomic():
        attendance = open_attendance(employee)
        if attendance is None:
            raise AttendanceError(f"{employee.full_name} is not clocked in")
        attendance = Attendance.objects.select_for_update().get(pk=attendance.pk)
        if now < attendance.clock_in_time:
            raise AttendanceError('Clock-out time cannot be before clock-in time')

        attendance.clock_out_time = now
        attendance.regular_hours, attendance.overtime_hours = split_hours(attendance.clock_in_time, now)
        attendance.location_out = location or ''
        if notes:
            attendance.notes = f"{attendance.notes}\n{notes}".strip()
        attendance.save()
    logger.info(f"{employee.employee_number} clocked out after {attendance.total_hours}h")
    return attendance
