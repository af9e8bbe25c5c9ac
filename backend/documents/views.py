from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from backend.core.pagination import paginated_response
from backend.core.permissions import IsManagerOrAdmin, is_admin_user
from backend.core.utils import create_audit_log
from .models import Document, DocumentTemplate
from .serializers import (
    DocumentSerializer, DocumentVersionSerializer, DocumentApprovalSerializer, DocumentShareSerializer,
    DocumentTemplateSerializer, BatchOperationSerializer, GenerateDocumentSerializer
)
from .filters import DocumentFilter
from .services import (
    create_document_version, process_approval, share_document, check_document_access, accessible_documents,
    expired_documents, documents_expiring_soon, archive_expired_documents, batch_operation,
    generate_document_from_template, document_statistics, DocumentOperationError
)


def _get_document(request, pk):
    """Fetch a document the user may see; returns (document, error response)"""
    document = get_object_or_404(Document.objects.select_related('created_by'), pk=pk)
    if not check_document_access(document, request.user):
        return None, Response({'detail': 'You do not have access to this document.'}, status=status.HTTP_403_FORBIDDEN)
    return document, None


def _can_modify(document, user):
    return is_admin_user(user) or (document.created_by_id is not None and document.created_by_id == user.id)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def document_list_create(request):
    if request.method == 'GET':
        queryset = accessible_documents(request.user, Document.objects.select_related('created_by'))
        queryset = DocumentFilter(request.query_params, queryset=queryset).qs
        return paginated_response(request, queryset, DocumentSerializer, default_limit=20)
    else:
        serializer = DocumentSerializer(data=request.data)
        if serializer.is_valid():
            document = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Document',
                object_id=document.id,
                object_name=document.name,
                object_reference=document.category,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def document_detail(request, pk):
    document, error = _get_document(request, pk)
    if error:
        return error

    if request.method == 'GET':
        data = DocumentSerializer(document).data
        data['versions'] = DocumentVersionSerializer(document.versions.all(), many=True).data
        data['approvals'] = DocumentApprovalSerializer(document.approvals.all(), many=True).data
        return Response(data)

    if not _can_modify(document, request.user):
        return Response({'detail': 'Only the owner or an admin can change this document.'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        serializer = DocumentSerializer(document, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        document_id, name = document.id, document.name
        document.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Document',
            object_id=document_id,
            object_name=name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def document_versions(request, pk):
    document, error = _get_document(request, pk)
    if error:
        return error
    if request.method == 'GET':
        return Response(DocumentVersionSerializer(document.versions.all(), many=True).data)
    serializer = DocumentVersionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    version = create_document_version(
        document,
        serializer.validated_data['file_path'],
        serializer.validated_data['file_url'],
        serializer.validated_data['file_size'],
        change_log=serializer.validated_data.get('change_log', ''),
        user=request.user,
    )
    return Response(DocumentVersionSerializer(version).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def document_approvals(request, pk):
    document, error = _get_document(request, pk)
    if error:
        return error
    if request.method == 'GET':
        return Response(DocumentApprovalSerializer(document.approvals.all(), many=True).data)

    if not IsManagerOrAdmin().has_permission(request, None):
        return Response({'detail': IsManagerOrAdmin.message}, status=status.HTTP_403_FORBIDDEN)
    serializer = DocumentApprovalSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    approval = process_approval(
        document,
        serializer.validated_data['status'],
        comments=serializer.validated_data.get('comments', ''),
        user=request.user,
    )
    create_audit_log(
        request=request,
        action='document_approve',
        model_name='Document',
        object_id=document.id,
        object_name=document.name,
        changes={'status': approval.status},
    )
    return Response(DocumentApprovalSerializer(approval).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def document_shares(request, pk):
    document, error = _get_document(request, pk)
    if error:
        return error
    if request.method == 'GET':
        return Response(DocumentShareSerializer(document.shares.select_related('shared_with'), many=True).data)

    if not _can_modify(document, request.user):
        return Response({'detail': 'Only the owner or an admin can share this document.'}, status=status.HTTP_403_FORBIDDEN)
    serializer = DocumentShareSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        share = share_document(
            document,
            shared_with=data.get('shared_with'),
            permissions=data.get('permissions', 'VIEW'),
            share_type=data.get('share_type', 'USER'),
            expiry_date=data.get('expiry_date'),
            message=data.get('message', ''),
            user=request.user,
        )
    except DocumentOperationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(DocumentShareSerializer(share).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def document_expired(request):
    documents = accessible_documents(request.user, expired_documents())
    return Response(DocumentSerializer(documents, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def document_expiring_soon(request):
    try:
        days = int(request.query_params.get('days', 30))
    except ValueError:
        return Response({'days': ['Must be an integer']}, status=status.HTTP_400_BAD_REQUEST)
    documents = accessible_documents(request.user, documents_expiring_soon(days))
    return Response(DocumentSerializer(documents, many=True).data)


@api_view(['POST'])
@permission_classes([IsManagerOrAdmin])
def document_archive_expired(request):
    return Response({'archived': archive_expired_documents()})


@api_view(['POST'])
@permission_classes([IsManagerOrAdmin])
def document_batch(request):
    serializer = BatchOperationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        affected = batch_operation(
            data['document_ids'],
            data['operation'],
            new_category=data.get('new_category'),
            comments=data.get('comments', ''),
            user=request.user,
        )
    except DocumentOperationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'operation': data['operation'], 'affected': affected})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def document_stats(request):
    return Response(document_statistics())


# Template views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def document_template_list_create(request):
    if request.method == 'GET':
        queryset = DocumentTemplate.objects.all()
        for field in ('category', 'template_type'):
            value = request.query_params.get(field)
            if value:
                queryset = queryset.filter(**{field: value})
        if request.query_params.get('is_active') is not None:
            queryset = queryset.filter(is_active=request.query_params.get('is_active').lower() == 'true')
        return paginated_response(request, queryset, DocumentTemplateSerializer, default_limit=20)
    else:
        serializer = DocumentTemplateSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save(created_by=request.user)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def document_template_detail(request, pk):
    template = get_object_or_404(DocumentTemplate, pk=pk)

    if request.method == 'GET':
        return Response(DocumentTemplateSerializer(template).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = DocumentTemplateSerializer(template, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        template.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def document_template_generate(request, pk):
    template = get_object_or_404(DocumentTemplate, pk=pk)
    serializer = GenerateDocumentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        document = generate_document_from_template(template, serializer.validated_data.get('variables'), user=request.user)
    except DocumentOperationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(DocumentSerializer(document).data, status=status.HTTP_201_CREATED)
