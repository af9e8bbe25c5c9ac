from django.urls import path
from .views import (
    document_list_create, document_detail, document_versions, document_approvals, document_shares,
    document_expired, document_expiring_soon, document_archive_expired, document_batch, document_stats,
    document_template_list_create, document_template_detail, document_template_generate,
)

urlpatterns = [
    path('documents/', document_list_create, name='document-list-create'),
    path('documents/expired/', document_expired, name='document-expired'),
    path('documents/expiring-soon/', document_expiring_soon, name='document-expiring-soon'),
    path('documents/archive-expired/', document_archive_expired, name='document-archive-expired'),
    path('documents/batch/', document_batch, name='document-batch'),
    path('documents/statistics/', document_stats, name='document-statistics'),
    path('documents/<int:pk>/', document_detail, name='document-detail'),
    path('documents/<int:pk>/versions/', document_versions, name='document-versions'),
    path('documents/<int:pk>/approvals/', document_approvals, name='document-approvals'),
    path('documents/<int:pk>/shares/', document_shares, name='document-shares'),

    path('document-templates/', document_template_list_create, name='document-template-list-create'),
    path('document-templates/<int:pk>/', document_template_detail, name='document-template-detail'),
    path('document-templates/<int:pk>/generate/', document_template_generate, name='document-template-generate'),
]
