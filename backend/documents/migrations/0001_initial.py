# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


CATEGORY_CHOICES = [
    ('CONTRACT', 'Contract'), ('INVOICE', 'Invoice'), ('RECEIPT', 'Receipt'),
    ('ALTERATION_PHOTO', 'Alteration Photo'), ('MEASUREMENT', 'Measurement'),
    ('EMPLOYEE_DOCUMENT', 'Employee Document'), ('VISA', 'Visa'), ('COMPLIANCE', 'Compliance'),
    ('OTHER', 'Other'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Document',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(choices=CATEGORY_CHOICES, max_length=30)),
                ('type', models.CharField(choices=[('PDF', 'PDF'), ('IMAGE', 'Image'), ('DOCUMENT', 'Document'), ('SPREADSHEET', 'Spreadsheet'), ('PRESENTATION', 'Presentation'), ('OTHER', 'Other')], max_length=20)),
                ('file_size', models.PositiveBigIntegerField()),
                ('mime_type', models.CharField(max_length=100)),
                ('file_path', models.CharField(max_length=500)),
                ('file_url', models.CharField(max_length=500)),
                ('is_public', models.BooleanField(default=False)),
                ('requires_approval', models.BooleanField(default=False)),
                ('is_archived', models.BooleanField(default=False)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('related_entity_type', models.CharField(blank=True, max_length=50)),
                ('related_entity_id', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='documents', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'documents',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['category'], name='documents_category_idx'),
                    models.Index(fields=['expiry_date'], name='documents_expiry_idx'),
                    models.Index(fields=['related_entity_type', 'related_entity_id'], name='documents_entity_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DocumentVersion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('version', models.CharField(max_length=20)),
                ('change_log', models.CharField(blank=True, max_length=500)),
                ('file_path', models.CharField(max_length=500)),
                ('file_url', models.CharField(max_length=500)),
                ('file_size', models.PositiveBigIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='document_versions', to=settings.AUTH_USER_MODEL)),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='versions', to='documents.document')),
            ],
            options={
                'db_table': 'document_versions',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='DocumentApproval',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('APPROVED', 'Approved'), ('REJECTED', 'Rejected'), ('REVISION_REQUESTED', 'Revision Requested')], max_length=20)),
                ('comments', models.TextField(blank=True)),
                ('approval_date', models.DateTimeField(auto_now_add=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='document_approvals', to=settings.AUTH_USER_MODEL)),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='approvals', to='documents.document')),
            ],
            options={
                'db_table': 'document_approvals',
                'ordering': ['-approval_date'],
            },
        ),
        migrations.CreateModel(
            name='DocumentShare',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('share_type', models.CharField(choices=[('USER', 'User'), ('DEPARTMENT', 'Department'), ('PUBLIC', 'Public')], default='USER', max_length=20)),
                ('permissions', models.CharField(choices=[('VIEW', 'View'), ('EDIT', 'Edit'), ('ADMIN', 'Admin')], default='VIEW', max_length=10)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('message', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('document', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shares', to='documents.document')),
                ('shared_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='documents_shared', to=settings.AUTH_USER_MODEL)),
                ('shared_with', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='shared_documents', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'document_shares',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='DocumentTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('description', models.CharField(blank=True, max_length=500)),
                ('category', models.CharField(choices=CATEGORY_CHOICES, max_length=30)),
                ('template_type', models.CharField(choices=[('PDF_TEMPLATE', 'PDF Template'), ('EMAIL_TEMPLATE', 'Email Template'), ('DOCUMENT_TEMPLATE', 'Document Template')], max_length=20)),
                ('content', models.TextField()),
                ('variables', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='document_templates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'document_templates',
                'ordering': ['name'],
            },
        ),
    ]
