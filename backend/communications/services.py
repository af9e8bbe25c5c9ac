"""Template rendering, dispatch and logging of outbound customer messages"""
import logging

from django.db.models import Count, Q
from django.utils import timezone

from backend.core.templating import render_placeholders
from backend.core.utils import record_event
from backend.parties.models import Customer
from .models import CommunicationTemplate, CommunicationProvider, MessageLog
from .providers import get_provider, ProviderError

logger = logging.getLogger(__name__)

CONTACT_METHOD_CHANNELS = {
    'EMAIL': 'EMAIL',
    'WHATSAPP': 'WHATSAPP',
    'SMS': 'SMS',
    'PHONE': 'SMS',
}


class TemplateNotFound(Exception):
    pass


class ProviderNotConfigured(Exception):
    pass


def get_active_provider(communication_type):
    config = CommunicationProvider.objects.filter(
        communication_type=communication_type, is_active=True
    ).order_by('-updated_at').first()
    if config is None:
        raise ProviderNotConfigured(f"No active provider found for {communication_type}")
    return config


def _resolve_template(template):
    if isinstance(template, CommunicationTemplate):
        return template
    try:
        return CommunicationTemplate.objects.get(pk=template)
    except (CommunicationTemplate.DoesNotExist, ValueError, TypeError):
        raise TemplateNotFound('Template not found')


def recipient_for(customer, communication_type):
    if communication_type == 'EMAIL':
        return customer.email or ''
    return customer.phone or ''


def _mark_failed(log, error):
    log.status = 'FAILED'
    log.failed_at = timezone.now()
    log.error_message = error


def deliver(log, config):
    """
    Push a stored MessageLog through a provider and record the outcome.
    Transport errors become a FAILED row and are not raised.
    """
    log.provider = config.provider
    try:
        if not log.recipient:
            raise ProviderError('Recipient is required')
        provider = get_provider(config)
        log.provider_message_id = provider.send(log.recipient, log.content, subject=log.subject or None) or ''
        log.status = 'SENT'
        log.sent_at = timezone.now()
        log.error_message = ''
    except ProviderError as e:
        logger.warning(f"Message {log.id} to {log.recipient} failed: {e}")
        _mark_failed(log, str(e))
    except Exception as e:
        logger.exception(f"Unexpected error sending message {log.id}")
        _mark_failed(log, f"Unexpected error: {e}")
    log.save()
    return log


def send_message(template, recipient, variables=None, customer=None, communication_type=None,
                 scheduled_for=None, metadata=None, user=None):
    """
    Render a template and send it, or store it PENDING when scheduled for later.

    Raises TemplateNotFound or ProviderNotConfigured before anything is
    logged. Provider failures are logged as FAILED and returned, not raised.
    """
    template = _resolve_template(template)
    variables = variables or {}
    communication_type = communication_type or template.communication_type
    config = get_active_provider(communication_type)

    log = MessageLog.objects.create(
        customer=customer,
        template=template,
        communication_type=communication_type,
        recipient=recipient or '',
        subject=render_placeholders(template.subject, variables),
        content=render_placeholders(template.content, variables),
        status='PENDING',
        provider=config.provider,
        scheduled_for=scheduled_for,
        metadata={**(metadata or {}), 'variables': variables},
        created_by=user,
    )

    if scheduled_for and scheduled_for > timezone.now():
        logger.info(f"Message {log.id} scheduled for {scheduled_for.isoformat()}")
        return log

    log = deliver(log, config)
    if log.status == 'SENT':
        record_event('message.sent', 'MessageLog', log.id, data={'type': communication_type, 'recipient': log.recipient}, user=user)
    return log


def send_bulk_messages(template, customer_ids, variables=None, scheduled_for=None, user=None):
    """
    Send one templated message per active customer, in sequence.
    A failure for one customer is logged and the loop carries on.
    """
    template = _resolve_template(template)
    communication_type = template.communication_type
    get_active_provider(communication_type)

    results = []
    for customer in Customer.objects.filter(id__in=customer_ids, is_active=True).order_by('id'):
        customer_variables = {
            'customerName': customer.full_name,
            'customerNumber': customer.customer_number,
            **(variables or {}),
        }
        log = send_message(
            template,
            recipient_for(customer, communication_type),
            variables=customer_variables,
            customer=customer,
            scheduled_for=scheduled_for,
            metadata={'bulk': True},
            user=user,
        )
        results.append(log)

    sent = sum(1 for log in results if log.status == 'SENT')
    logger.info(f"Bulk send with template {template.id}: {sent}/{len(results)} sent")
    return results


def process_scheduled_messages(now=None):
    """Send every PENDING message whose scheduled time has come. Returns how many were processed."""
    now = now or timezone.now()
    due = MessageLog.objects.filter(status='PENDING', scheduled_for__lte=now).order_by('scheduled_for')
    processed = 0
    for log in due:
        try:
            config = get_active_provider(log.communication_type)
        except ProviderNotConfigured as e:
            log.status = 'FAILED'
            log.failed_at = timezone.now()
            log.error_message = str(e)
            log.save(update_fields=['status', 'failed_at', 'error_message', 'updated_at'])
        else:
            deliver(log, config)
        processed += 1
    if processed:
        logger.info(f"Processed {processed} scheduled message(s)")
    return processed


def update_message_status(log, status, error_message=''):
    log.status = status
    if status == 'DELIVERED':
        log.delivered_at = timezone.now()
    elif status == 'FAILED':
        log.failed_at = timezone.now()
        if error_message:
            log.error_message = error_message
    log.save()
    return log


def _find_template(category, communication_type=None):
    templates = CommunicationTemplate.objects.filter(category=category, is_active=True)
    if communication_type:
        template = templates.filter(communication_type=communication_type).first()
        if template is not None:
            return template
    template = templates.first()
    if template is None:
        raise TemplateNotFound(f"No active {category.lower().replace('_', ' ')} template found")
    return template


def send_order_status_update(order, status=None, user=None):
    """Tell the customer about an order's status over their preferred channel"""
    customer = order.customer
    channel = CONTACT_METHOD_CHANNELS.get(customer.preferred_contact_method, 'SMS')
    template = _find_template('ORDER_STATUS', channel)
    variables = {
        'customerName': customer.full_name,
        'orderNumber': order.order_number,
        'status': status or order.status,
        'serviceDescription': order.service_description,
        'deliveryDate': str(order.delivery_date),
    }
    return send_message(
        template,
        recipient_for(customer, template.communication_type),
        variables=variables,
        customer=customer,
        metadata={'order_id': order.id},
        user=user,
    )


def send_birthday_wish(customer, user=None):
    template = _find_template('BIRTHDAY')
    return send_message(
        template,
        recipient_for(customer, template.communication_type),
        variables={'customerName': customer.full_name},
        customer=customer,
        user=user,
    )


def communication_analytics(date_from=None, date_to=None, communication_type=None):
    queryset = MessageLog.objects.all()
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)
    if communication_type:
        queryset = queryset.filter(communication_type=communication_type)

    delivery_rates = []
    for row in queryset.values('communication_type').annotate(
        succeeded=Count('id', filter=Q(status__in=['SENT', 'DELIVERED'])),
        failed=Count('id', filter=Q(status='FAILED')),
    ).order_by('communication_type'):
        attempted = row['succeeded'] + row['failed']
        delivery_rates.append({
            'communication_type': row['communication_type'],
            'succeeded': row['succeeded'],
            'failed': row['failed'],
            'success_rate': round(row['succeeded'] * 100 / attempted, 2) if attempted else 0,
        })

    return {
        'total_messages': queryset.count(),
        'status_breakdown': list(queryset.values('status').annotate(count=Count('id')).order_by('status')),
        'type_breakdown': list(queryset.values('communication_type').annotate(count=Count('id')).order_by('communication_type')),
        'delivery_rates': delivery_rates,
    }
