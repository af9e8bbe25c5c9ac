"""Role-based dashboard menu served to the front end"""

ALL_ROLES = ['ADMIN', 'MANAGER', 'CUTTER', 'STITCHER', 'PRESSER', 'DELIVERY']
PRODUCTION_ROLES = ['ADMIN', 'MANAGER', 'CUTTER', 'STITCHER', 'PRESSER']

NAVIGATION_ITEMS = [
    {'key': 'dashboard', 'label': 'Dashboard', 'path': '/dashboard', 'roles': ALL_ROLES},
    {'key': 'orders', 'label': 'Orders', 'path': '/dashboard/orders', 'roles': ALL_ROLES},
    {'key': 'customers', 'label': 'Customers', 'path': '/dashboard/customers', 'roles': ['ADMIN', 'MANAGER']},
    {'key': 'measurements', 'label': 'Measurements', 'path': '/dashboard/measurements', 'roles': ['ADMIN', 'MANAGER', 'CUTTER']},
    {'key': 'tasks', 'label': 'Tasks', 'path': '/dashboard/tasks', 'roles': PRODUCTION_ROLES},
    {'key': 'employees', 'label': 'Employees', 'path': '/dashboard/employees', 'roles': ['ADMIN', 'MANAGER']},
    {'key': 'inventory', 'label': 'Inventory', 'path': '/dashboard/inventory', 'roles': ['ADMIN', 'MANAGER', 'CUTTER']},
    {'key': 'suppliers', 'label': 'Suppliers', 'path': '/dashboard/suppliers', 'roles': ['ADMIN', 'MANAGER']},
    {'key': 'purchase_orders', 'label': 'Purchase Orders', 'path': '/dashboard/purchase-orders', 'roles': ['ADMIN', 'MANAGER']},
    {'key': 'communications', 'label': 'Communications', 'path': '/dashboard/communications', 'roles': ['ADMIN', 'MANAGER']},
    {'key': 'documents', 'label': 'Documents', 'path': '/dashboard/documents', 'roles': ['ADMIN', 'MANAGER']},
    {'key': 'payroll', 'label': 'Payroll', 'path': '/dashboard/payroll', 'roles': ['ADMIN']},
    {'key': 'reports', 'label': 'Reports', 'path': '/dashboard/reports', 'roles': ['ADMIN', 'MANAGER']},
    {'key': 'deliveries', 'label': 'Deliveries', 'path': '/dashboard/deliveries', 'roles': ['ADMIN', 'MANAGER', 'DELIVERY']},
    {'key': 'settings', 'label': 'Settings', 'path': '/dashboard/settings', 'roles': ['ADMIN']},
]


def navigation_for_role(role):
    return [
        {k: v for k, v in item.items() if k != 'roles'}
        for item in NAVIGATION_ITEMS
        if role in item['roles']
    ]


def navigation_for_user(user):
    return navigation_for_role(user.effective_role)
