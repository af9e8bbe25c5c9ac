from rest_framework.permissions import BasePermission

MANAGEMENT_ROLES = ('ADMIN', 'MANAGER')


def is_admin_user(user):
    """ADMIN role, superuser or staff"""
    if not user or not user.is_authenticated:
        return False
    return user.is_superuser or user.is_staff or getattr(user, 'role', None) == 'ADMIN'


def is_manager_or_admin(user):
    if is_admin_user(user):
        return True
    return bool(user and user.is_authenticated and getattr(user, 'role', None) in MANAGEMENT_ROLES)


class IsManagerOrAdmin(BasePermission):
    """Allows access to ADMIN and MANAGER roles"""
    message = 'Manager or admin role required.'

    def has_permission(self, request, view):
        return is_manager_or_admin(request.user)


class IsAdminRole(BasePermission):
    message = 'Admin role required.'

    def has_permission(self, request, view):
        return is_admin_user(request.user)
