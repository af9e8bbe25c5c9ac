"""Utility functions for audit logging, events and runtime settings"""
import logging
import uuid

from django.utils import timezone

from .models import AuditLog, Event, Setting

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def _resolve_user(request=None, user=None):
    if user:
        return user
    if request and hasattr(request, 'user'):
        return request.user
    return None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, status_change, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., customer name)
        object_reference: Reference identifier (e.g., order number, PO number)
    """
    try:
        audit_user = _resolve_user(request, user)
        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Audit logging never fails the main operation
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def record_event(event_type, entity_type, entity_id, data=None, request=None, user=None):
    """Append a row to the event feed. Returns the Event or None on failure."""
    try:
        event_user = _resolve_user(request, user)
        return Event.objects.create(
            type=event_type,
            entity_type=entity_type,
            entity_id=str(entity_id),
            data=data or {},
            user=event_user if event_user and event_user.is_authenticated else None,
        )
    except Exception as e:
        logger.error(f"Failed to record event {event_type}: {str(e)}")
        return None


def get_setting(key, default=None):
    """Read a runtime setting from the settings table"""
    setting = Setting.objects.filter(key=key).first()
    if setting is None:
        return default
    return setting.value


def generate_number(prefix, model, field):
    """Generate a unique reference like ORD-20261019-1A2B3C for the given model field"""
    while True:
        number = f"{prefix}-{timezone.now().strftime('%Y%m%d')}-{uuid.uuid4().hex[:6].upper()}"
        if not model.objects.filter(**{field: number}).exists():
            return number
