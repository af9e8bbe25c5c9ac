"""
Test suite for Documents module
Tests: access control, versions, approvals, shares, expiry, batch operations, template generation and statistics
"""
from datetime import timedelta
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.documents.models import Document, DocumentApproval, DocumentTemplate
from backend.documents.services import (
    check_document_access, generate_document_from_template, share_document, DocumentOperationError,
)


class DocumentAccessTests(TestCase):

    def setUp(self):
        self.owner = TestDataFactory.create_user(role='MANAGER')
        self.other = TestDataFactory.create_user(role='STITCHER')
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.document = TestDataFactory.create_document(user=self.owner)
        self.client = AuthenticatedAPIClient()

    def test_private_document_hidden_from_others(self):
        self.client.authenticate_user(self.other)
        response = self.client.get(f'/api/v1/documents/{self.document.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get('/api/v1/documents/')
        self.assertEqual(response.data['count'], 0)

    def test_owner_public_and_admin_access(self):
        self.assertTrue(check_document_access(self.document, self.owner))
        self.assertTrue(check_document_access(self.document, self.admin))
        public = TestDataFactory.create_document(user=self.owner, is_public=True)
        self.assertTrue(check_document_access(public, self.other))

    def test_share_grants_access_until_expiry(self):
        share = share_document(self.document, shared_with=self.other, user=self.owner)
        self.assertTrue(check_document_access(self.document, self.other))

        share.expiry_date = timezone.localdate() - timedelta(days=1)
        share.save()
        self.assertFalse(check_document_access(self.document, self.other))

    def test_user_share_needs_a_user(self):
        with self.assertRaises(DocumentOperationError):
            share_document(self.document, share_type='USER')

    def test_only_owner_or_admin_can_modify(self):
        share_document(self.document, shared_with=self.other, user=self.owner)
        self.client.authenticate_user(self.other)
        response = self.client.patch(f'/api/v1/documents/{self.document.id}/', {'name': 'renamed.pdf'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.owner)
        response = self.client.patch(f'/api/v1/documents/{self.document.id}/', {'name': 'renamed.pdf'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_share_endpoint(self):
        self.client.authenticate_user(self.owner)
        response = self.client.post(
            f'/api/v1/documents/{self.document.id}/shares/',
            {'shared_with': self.other.id, 'permissions': 'EDIT'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['shared_with_username'], self.other.username)

        self.client.authenticate_user(self.other)
        response = self.client.get('/api/v1/documents/')
        self.assertEqual(response.data['count'], 1)


class DocumentAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_document(self):
        response = self.client.post('/api/v1/documents/', {
            'name': 'visa-ravi.pdf',
            'category': 'VISA',
            'type': 'PDF',
            'file_size': 2048,
            'mime_type': 'application/pdf',
            'file_path': 'documents/visa-ravi.pdf',
            'file_url': '/media/documents/visa-ravi.pdf',
            'tags': ['visa', 'staff'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], self.user.id)

    def test_file_size_limits(self):
        payload = {
            'name': 'big.pdf', 'category': 'OTHER', 'type': 'PDF', 'mime_type': 'application/pdf',
            'file_path': 'documents/big.pdf', 'file_url': '/media/documents/big.pdf',
        }
        response = self.client.post('/api/v1/documents/', {**payload, 'file_size': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/documents/', {**payload, 'file_size': 60 * 1024 * 1024}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_tag_filter(self):
        TestDataFactory.create_document(user=self.user, tags=['visa'])
        TestDataFactory.create_document(user=self.user, tags=['invoice'])
        response = self.client.get('/api/v1/documents/?tag=visa')
        self.assertEqual(response.data['count'], 1)

    def test_versions_are_numbered(self):
        document = TestDataFactory.create_document(user=self.user)
        for n in range(2):
            response = self.client.post(f'/api/v1/documents/{document.id}/versions/', {
                'file_path': f'documents/v{n}.pdf',
                'file_url': f'/media/documents/v{n}.pdf',
                'file_size': 4096,
                'change_log': f'Revision {n}',
            }, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['version'], '2')
        document.refresh_from_db()
        self.assertEqual(document.file_path, 'documents/v1.pdf')
        self.assertEqual(document.file_size, 4096)

    def test_approval_clears_requires_approval(self):
        document = TestDataFactory.create_document(user=self.user, requires_approval=True)
        response = self.client.post(
            f'/api/v1/documents/{document.id}/approvals/',
            {'status': 'REVISION_REQUESTED', 'comments': 'Wrong client name'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        document.refresh_from_db()
        self.assertTrue(document.requires_approval)

        self.client.post(f'/api/v1/documents/{document.id}/approvals/', {'status': 'APPROVED'}, format='json')
        document.refresh_from_db()
        self.assertFalse(document.requires_approval)
        self.assertEqual(DocumentApproval.objects.filter(document=document).count(), 2)

    def test_approval_requires_manager(self):
        stitcher = TestDataFactory.create_user(role='STITCHER')
        document = TestDataFactory.create_document(user=stitcher, requires_approval=True)
        self.client.authenticate_user(stitcher)
        response = self.client.post(f'/api/v1/documents/{document.id}/approvals/', {'status': 'APPROVED'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class DocumentExpiryAndBatchTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        today = timezone.localdate()
        self.expired = TestDataFactory.create_document(user=self.admin, expiry_date=today - timedelta(days=3))
        self.soon = TestDataFactory.create_document(user=self.admin, expiry_date=today + timedelta(days=10))
        self.later = TestDataFactory.create_document(user=self.admin, expiry_date=today + timedelta(days=90))

    def test_expired_and_expiring_soon(self):
        response = self.client.get('/api/v1/documents/expired/')
        self.assertEqual([d['id'] for d in response.data], [self.expired.id])
        response = self.client.get('/api/v1/documents/expiring-soon/?days=30')
        self.assertEqual([d['id'] for d in response.data], [self.soon.id])
        response = self.client.get('/api/v1/documents/expiring-soon/?days=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_archive_expired_keeps_rows(self):
        response = self.client.post('/api/v1/documents/archive-expired/')
        self.assertEqual(response.data, {'archived': 1})
        self.expired.refresh_from_db()
        self.assertTrue(self.expired.is_archived)
        self.assertEqual(Document.objects.count(), 3)

    def test_batch_update_category(self):
        ids = [self.soon.id, self.later.id]
        response = self.client.post('/api/v1/documents/batch/', {'document_ids': ids, 'operation': 'UPDATE_CATEGORY'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            '/api/v1/documents/batch/',
            {'document_ids': ids, 'operation': 'UPDATE_CATEGORY', 'new_category': 'COMPLIANCE'},
            format='json',
        )
        self.assertEqual(response.data['affected'], 2)
        self.assertEqual(Document.objects.filter(category='COMPLIANCE').count(), 2)

    def test_batch_approve_and_delete(self):
        response = self.client.post(
            '/api/v1/documents/batch/', {'document_ids': [self.soon.id], 'operation': 'APPROVE'}, format='json',
        )
        self.assertEqual(response.data['affected'], 1)
        self.assertEqual(self.soon.approvals.get().status, 'APPROVED')

        response = self.client.post(
            '/api/v1/documents/batch/', {'document_ids': [self.expired.id, self.later.id], 'operation': 'DELETE'}, format='json',
        )
        self.assertEqual(response.data['affected'], 2)
        self.assertEqual(list(Document.objects.values_list('id', flat=True)), [self.soon.id])

    def test_statistics(self):
        response = self.client.get('/api/v1/documents/statistics/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_documents'], 3)
        self.assertEqual(response.data['expired'], 1)
        self.assertEqual(response.data['expiring_soon'], 1)
        self.assertEqual(response.data['total_size'], 3 * 1024)


class DocumentTemplateTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(role='MANAGER')

    def _template(self, template_type, **extra):
        return DocumentTemplate.objects.create(
            name='Alteration receipt',
            category='RECEIPT',
            template_type=template_type,
            content='Receipt for {{customerName}}: {{amount}} AED',
            **extra
        )

    def test_generate_renders_and_needs_approval(self):
        template = self._template('PDF_TEMPLATE')
        document = generate_document_from_template(template, {'customerName': 'Mona', 'amount': '120'}, user=self.user)
        self.assertEqual(document.type, 'PDF')
        self.assertEqual(document.mime_type, 'application/pdf')
        self.assertTrue(document.file_path.endswith('.pdf'))
        self.assertTrue(document.requires_approval)
        self.assertFalse(document.is_public)
        self.assertEqual(document.metadata['content'], 'Receipt for Mona: 120 AED')

    def test_email_template_output_is_html_document(self):
        document = generate_document_from_template(self._template('EMAIL_TEMPLATE'), user=self.user)
        self.assertEqual(document.type, 'DOCUMENT')
        self.assertEqual(document.mime_type, 'text/html')
        self.assertEqual(document.metadata['content'], 'Receipt for {{customerName}}: {{amount}} AED')

    def test_inactive_template_rejected(self):
        template = self._template('DOCUMENT_TEMPLATE', is_active=False)
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.post(f'/api/v1/document-templates/{template.id}/generate/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
