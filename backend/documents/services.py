"""Document versions, approvals, sharing and template generation"""
import logging
from datetime import timedelta

from django.db import transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from backend.core.permissions import is_admin_user
from backend.core.templating import render_placeholders
from .models import Document, DocumentVersion, DocumentApproval, DocumentShare, DocumentTemplate

logger = logging.getLogger(__name__)

BATCH_OPERATIONS = ('DELETE', 'APPROVE', 'REJECT', 'ARCHIVE', 'RESTORE', 'UPDATE_CATEGORY')

TEMPLATE_OUTPUT = {
    # template_type: (document type, mime type, extension)
    'PDF_TEMPLATE': ('PDF', 'application/pdf', 'pdf'),
    'EMAIL_TEMPLATE': ('DOCUMENT', 'text/html', 'html'),
    'DOCUMENT_TEMPLATE': ('DOCUMENT', 'application/msword', 'doc'),
}


class DocumentOperationError(Exception):
    pass


def create_document_version(document, file_path, file_url, file_size, change_log='', user=None):
    """Add a version numbered count + 1 and point the document at the new file"""
    with transaction.atomic():
        next_version = str(DocumentVersion.objects.filter(document=document).count() + 1)
        version = DocumentVersion.objects.create(
            document=document,
            version=next_version,
            change_log=change_log,
            file_path=file_path,
            file_url=file_url,
            file_size=file_size,
            created_by=user,
        )
        document.file_path = file_path
        document.file_url = file_url
        document.file_size = file_size
        document.save(update_fields=['file_path', 'file_url', 'file_size', 'updated_at'])
    return version


def process_approval(document, status, comments='', user=None):
    """
    Append an approval decision. APPROVED clears requires_approval;
    earlier decisions are kept and the latest one wins.
    """
    approval = DocumentApproval.objects.create(
        document=document,
        approved_by=user,
        status=status,
        comments=comments or '',
    )
    if status == 'APPROVED' and document.requires_approval:
        document.requires_approval = False
        document.save(update_fields=['requires_approval', 'updated_at'])
    return approval


def share_document(document, shared_with=None, permissions='VIEW', share_type='USER', expiry_date=None, message='', user=None):
    if share_type == 'USER' and shared_with is None:
        raise DocumentOperationError('A user is required for USER shares')
    return DocumentShare.objects.create(
        document=document,
        shared_with=shared_with,
        share_type=share_type,
        permissions=permissions,
        expiry_date=expiry_date,
        message=message or '',
        shared_by=user,
    )


def _active_shares(document, user):
    today = timezone.localdate()
    return document.shares.filter(
        Q(shared_with=user) | Q(share_type='PUBLIC')
    ).filter(Q(expiry_date__isnull=True) | Q(expiry_date__gte=today))


def check_document_access(document, user):
    """Public documents, the owner, admins and users it is shared with may see it"""
    if document.is_public or is_admin_user(user):
        return True
    if document.created_by_id and document.created_by_id == user.id:
        return True
    return _active_shares(document, user).exists()


def accessible_documents(user, queryset=None):
    queryset = queryset if queryset is not None else Document.objects.all()
    if is_admin_user(user):
        return queryset
    today = timezone.localdate()
    shared = Q(shares__shared_with=user) | Q(shares__share_type='PUBLIC')
    not_expired = Q(shares__expiry_date__isnull=True) | Q(shares__expiry_date__gte=today)
    return queryset.filter(Q(is_public=True) | Q(created_by=user) | (shared & not_expired)).distinct()


def expired_documents(today=None):
    today = today or timezone.localdate()
    return Document.objects.filter(expiry_date__lt=today).order_by('expiry_date')


def documents_expiring_soon(days=30, today=None):
    today = today or timezone.localdate()
    return Document.objects.filter(
        expiry_date__gte=today,
        expiry_date__lte=today + timedelta(days=days),
    ).order_by('expiry_date')


def archive_expired_documents():
    """Archive, never delete, documents past their expiry date"""
    updated = expired_documents().filter(is_archived=False).update(is_archived=True, updated_at=timezone.now())
    if updated:
        logger.info(f"Archived {updated} expired document(s)")
    return updated


def batch_operation(document_ids, operation, new_category=None, comments='', user=None):
    """Apply one operation to many documents. Returns the number of documents affected."""
    if operation not in BATCH_OPERATIONS:
        raise DocumentOperationError(f"Unsupported operation: {operation}")
    if operation == 'UPDATE_CATEGORY' and not new_category:
        raise DocumentOperationError('New category is required for UPDATE_CATEGORY operation')

    documents = Document.objects.filter(id__in=document_ids)
    with transaction.atomic():
        if operation == 'DELETE':
            affected = documents.count()
            documents.delete()
        elif operation in ('APPROVE', 'REJECT'):
            status = 'APPROVED' if operation == 'APPROVE' else 'REJECTED'
            affected = 0
            for document in documents:
                process_approval(document, status, comments=comments, user=user)
                affected += 1
        elif operation == 'ARCHIVE':
            affected = documents.update(is_archived=True, updated_at=timezone.now())
        elif operation == 'RESTORE':
            affected = documents.update(is_archived=False, updated_at=timezone.now())
        else:
            affected = documents.update(category=new_category, updated_at=timezone.now())
    logger.info(f"Batch {operation} on {affected} document(s)")
    return affected


def generate_document_from_template(template, variables=None, user=None):
    """Render a template with literal placeholder substitution and store the result as a document needing approval"""
    if not template.is_active:
        raise DocumentOperationError('Template is inactive')
    variables = variables or {}
    content = render_placeholders(template.content, variables)
    doc_type, mime_type, extension = TEMPLATE_OUTPUT.get(template.template_type, ('OTHER', 'application/octet-stream', 'bin'))
    stamp = timezone.now().strftime('%Y%m%d%H%M%S%f')
    path = f"/generated/{stamp}.{extension}"
    return Document.objects.create(
        name=f"Generated from {template.name}",
        description=f"Auto-generated document from template: {template.name}",
        category=template.category,
        type=doc_type,
        file_size=max(len(content.encode('utf-8')), 1),
        mime_type=mime_type,
        file_path=path,
        file_url=path,
        is_public=False,
        requires_approval=True,
        metadata={
            'template_id': template.id,
            'template_name': template.name,
            'variables': variables,
            'content': content,
        },
        created_by=user,
    )


def document_statistics():
    return {
        'total_documents': Document.objects.count(),
        'total_versions': DocumentVersion.objects.count(),
        'total_approvals': DocumentApproval.objects.count(),
        'total_shares': DocumentShare.objects.count(),
        'pending_approval': Document.objects.filter(requires_approval=True, is_archived=False).count(),
        'archived': Document.objects.filter(is_archived=True).count(),
        'expired': expired_documents().count(),
        'expiring_soon': documents_expiring_soon().count(),
        'total_size': Document.objects.aggregate(s=Sum('file_size'))['s'] or 0,
        'by_category': list(Document.objects.values('category').annotate(count=Count('id'), total_size=Sum('file_size')).order_by('category')),
        'by_type': list(Document.objects.values('type').annotate(count=Count('id')).order_by('type')),
    }
