from django.urls import path
from .views import (
    employee_list_create, employee_detail,
    bonus_list_create, bonus_detail,
    payroll_list, payroll_detail, payroll_generate, payroll_generate_bulk,
    payroll_payslip_pdf, payroll_payslip_html,
    employee_clock_in, employee_clock_out, employee_clock_status, employee_attendance_list, attendance_list,
)

urlpatterns = [
    path('employees/', employee_list_create, name='employee-list-create'),
    path('employees/<int:pk>/', employee_detail, name='employee-detail'),
    path('employees/<int:pk>/clock-in/', employee_clock_in, name='employee-clock-in'),
    path('employees/<int:pk>/clock-out/', employee_clock_out, name='employee-clock-out'),
    path('employees/<int:pk>/clock-status/', employee_clock_status, name='employee-clock-status'),
    path('employees/<int:pk>/attendance/', employee_attendance_list, name='employee-attendance'),
    path('attendance/', attendance_list, name='attendance-list'),

    path('bonuses/', bonus_list_create, name='bonus-list-create'),
    path('bonuses/<int:pk>/', bonus_detail, name='bonus-detail'),

    path('payrolls/', payroll_list, name='payroll-list'),
    path('payrolls/generate/', payroll_generate, name='payroll-generate'),
    path('payrolls/generate-bulk/', payroll_generate_bulk, name='payroll-generate-bulk'),
    path('payrolls/<int:pk>/', payroll_detail, name='payroll-detail'),
    path('payrolls/<int:pk>/payslip/', payroll_payslip_pdf, name='payroll-payslip-pdf'),
    path('payrolls/<int:pk>/payslip/html/', payroll_payslip_html, name='payroll-payslip-html'),
]
