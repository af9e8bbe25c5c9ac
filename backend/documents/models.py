from django.db import models
from backend.core.models import User

CATEGORY_CHOICES = [
    ('CONTRACT', 'Contract'),
    ('INVOICE', 'Invoice'),
    ('RECEIPT', 'Receipt'),
    ('ALTERATION_PHOTO', 'Alteration Photo'),
    ('MEASUREMENT', 'Measurement'),
    ('EMPLOYEE_DOCUMENT', 'Employee Document'),
    ('VISA', 'Visa'),
    ('COMPLIANCE', 'Compliance'),
    ('OTHER', 'Other'),
]

MAX_FILE_SIZE = 50 * 1024 * 1024


class Document(models.Model):
    """Metadata for a stored file; the file itself lives at file_path/file_url"""
    TYPE_CHOICES = [
        ('PDF', 'PDF'),
        ('IMAGE', 'Image'),
        ('DOCUMENT', 'Document'),
        ('SPREADSHEET', 'Spreadsheet'),
        ('PRESENTATION', 'Presentation'),
        ('OTHER', 'Other'),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    file_size = models.PositiveBigIntegerField()
    mime_type = models.CharField(max_length=100)
    file_path = models.CharField(max_length=500)
    file_url = models.CharField(max_length=500)
    is_public = models.BooleanField(default=False)
    requires_approval = models.BooleanField(default=False)
    is_archived = models.BooleanField(default=False)
    expiry_date = models.DateField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    related_entity_type = models.CharField(max_length=50, blank=True)
    related_entity_id = models.CharField(max_length=50, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='documents')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'documents'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category'], name='documents_category_idx'),
            models.Index(fields=['expiry_date'], name='documents_expiry_idx'),
            models.Index(fields=['related_entity_type', 'related_entity_id'], name='documents_entity_idx'),
        ]


class DocumentVersion(models.Model):
    document = models.ForeignKey(Document, on_delete=models.CASCADE, related_name='versions')
    version = models.CharField(max_length=20)
    change_log = models.CharField(max_length=500, blank=True)
    file_path = models.CharField(max_length=500)
    file_url = models.CharField(max_length=500)
    file_size = models.PositiveBigIntegerField()
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='document_versions')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.document.name} v{self.version}"

    class Meta:
        db_table = 'document_versions'
        ordering = ['-created_at']


class DocumentApproval(models.Model):
    STATUS_CHOICES = [
        ('APPROVED', 'Approved'),
        ('REJECTED', 'Rejected'),
        ('REVISION_REQUESTED', 'Revision Requested'),
    ]

    document = models.ForeignKey(Document, on_delete=models.CASCADE, related_name='approvals')
    approved_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='document_approvals')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    comments = models.TextField(blank=True)
    approval_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'document_approvals'
        ordering = ['-approval_date']


class DocumentShare(models.Model):
    SHARE_TYPE_CHOICES = [
        ('USER', 'User'),
        ('DEPARTMENT', 'Department'),
        ('PUBLIC', 'Public'),
    ]
    PERMISSION_CHOICES = [
        ('VIEW', 'View'),
        ('EDIT', 'Edit'),
        ('ADMIN', 'Admin'),
    ]

    document = models.ForeignKey(Document, on_delete=models.CASCADE, related_name='shares')
    shared_with = models.ForeignKey(User, on_delete=models.CASCADE, null=True, blank=True, related_name='shared_documents')
    share_type = models.CharField(max_length=20, choices=SHARE_TYPE_CHOICES, default='USER')
    permissions = models.CharField(max_length=10, choices=PERMISSION_CHOICES, default='VIEW')
    expiry_date = models.DateField(null=True, blank=True)
    message = models.CharField(max_length=500, blank=True)
    shared_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='documents_shared')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'document_shares'
        ordering = ['-created_at']


class DocumentTemplate(models.Model):
    TEMPLATE_TYPE_CHOICES = [
        ('PDF_TEMPLATE', 'PDF Template'),
        ('EMAIL_TEMPLATE', 'Email Template'),
        ('DOCUMENT_TEMPLATE', 'Document Template'),
    ]

    name = models.CharField(max_length=100)
    description = models.CharField(max_length=500, blank=True)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    template_type = models.CharField(max_length=20, choices=TEMPLATE_TYPE_CHOICES)
    content = models.TextField()
    variables = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='document_templates')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'document_templates'
        ordering = ['name']
