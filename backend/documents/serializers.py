from rest_framework import serializers
from .models import Document, DocumentVersion, DocumentApproval, DocumentShare, DocumentTemplate, CATEGORY_CHOICES, MAX_FILE_SIZE
from .services import BATCH_OPERATIONS


class DocumentVersionSerializer(serializers.ModelSerializer):
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = DocumentVersion
        fields = ['id', 'document', 'version', 'change_log', 'file_path', 'file_url', 'file_size', 'created_by', 'created_by_username', 'created_at']
        read_only_fields = ['document', 'version', 'created_by', 'created_at']

    def validate_file_size(self, value):
        if value < 1:
            raise serializers.ValidationError('File size must be greater than 0')
        return value


class DocumentApprovalSerializer(serializers.ModelSerializer):
    approved_by_username = serializers.CharField(source='approved_by.username', read_only=True, default=None)
    comments = serializers.CharField(max_length=1000, required=False, allow_blank=True)

    class Meta:
        model = DocumentApproval
        fields = ['id', 'document', 'approved_by', 'approved_by_username', 'status', 'comments', 'approval_date']
        read_only_fields = ['document', 'approved_by', 'approval_date']


class DocumentShareSerializer(serializers.ModelSerializer):
    shared_with_username = serializers.CharField(source='shared_with.username', read_only=True, default=None)

    class Meta:
        model = DocumentShare
        fields = [
            'id', 'document', 'shared_with', 'shared_with_username', 'share_type', 'permissions',
            'expiry_date', 'message', 'shared_by', 'created_at'
        ]
        read_only_fields = ['document', 'shared_by', 'created_at']


class DocumentSerializer(serializers.ModelSerializer):
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)
    version_count = serializers.IntegerField(source='versions.count', read_only=True)
    latest_approval = serializers.SerializerMethodField()
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)

    class Meta:
        model = Document
        fields = [
            'id', 'name', 'description', 'category', 'type', 'file_size', 'mime_type', 'file_path',
            'file_url', 'is_public', 'requires_approval', 'is_archived', 'expiry_date', 'tags',
            'metadata', 'related_entity_type', 'related_entity_id', 'version_count', 'latest_approval',
            'created_by', 'created_by_username', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def get_latest_approval(self, obj):
        approval = obj.approvals.first()
        return DocumentApprovalSerializer(approval).data if approval else None

    def validate_file_size(self, value):
        if value < 1:
            raise serializers.ValidationError('File size must be greater than 0')
        if value > MAX_FILE_SIZE:
            raise serializers.ValidationError('File size must be less than 50MB')
        return value


class DocumentTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = DocumentTemplate
        fields = [
            'id', 'name', 'description', 'category', 'template_type', 'content', 'variables',
            'is_active', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']


class BatchOperationSerializer(serializers.Serializer):
    document_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    operation = serializers.ChoiceField(choices=BATCH_OPERATIONS)
    new_category = serializers.ChoiceField(choices=CATEGORY_CHOICES, required=False)
    comments = serializers.CharField(required=False, allow_blank=True)


class GenerateDocumentSerializer(serializers.Serializer):
    variables = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)
