# Generated manually for the initial evidence schema

import django.db.models.deletion
import evidence.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('complaints', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Evidence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('file', models.FileField(max_length=255, upload_to=evidence.models.evidence_upload_path, verbose_name='File')),
                ('file_name', models.CharField(max_length=255, verbose_name='Original File Name')),
                ('mime_type', models.CharField(max_length=100, verbose_name='MIME Type')),
                ('file_size', models.PositiveBigIntegerField(verbose_name='Size (bytes)')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('complaint', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='evidence', to='complaints.complaint', verbose_name='Complaint')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='uploaded_evidence', to=settings.AUTH_USER_MODEL, verbose_name='Uploaded By')),
            ],
            options={
                'verbose_name': 'Evidence',
                'verbose_name_plural': 'Evidence',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
