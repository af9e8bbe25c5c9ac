from django.contrib import admin
from .models import Document, DocumentVersion, DocumentApproval, DocumentShare, DocumentTemplate


class DocumentVersionInline(admin.TabularInline):
    model = DocumentVersion
    extra = 0
    fields = ['version', 'change_log', 'file_path', 'file_size', 'created_by', 'created_at']
    readonly_fields = ['created_at']


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'type', 'is_public', 'requires_approval', 'is_archived', 'expiry_date', 'created_by']
    list_filter = ['category', 'type', 'is_public', 'requires_approval', 'is_archived']
    search_fields = ['name', 'description']
    inlines = [DocumentVersionInline]


@admin.register(DocumentApproval)
class DocumentApprovalAdmin(admin.ModelAdmin):
    list_display = ['document', 'status', 'approved_by', 'approval_date']
    list_filter = ['status']


@admin.register(DocumentShare)
class DocumentShareAdmin(admin.ModelAdmin):
    list_display = ['document', 'shared_with', 'share_type', 'permissions', 'expiry_date', 'shared_by']


@admin.register(DocumentTemplate)
class DocumentTemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'template_type', 'is_active']
    list_filter = ['category', 'template_type', 'is_active']
