import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('filename', models.CharField(help_text='Display name, unique across all users', max_length=255, unique=True)),
                ('content', models.FileField(help_text='Storage key: {owner_id}/{random}{ext}', max_length=255, upload_to='')),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('content_type', models.CharField(help_text='MIME type reported at upload', max_length=255)),
                ('checksum_sha256', models.CharField(blank=True, default='', help_text='SHA256 hash for integrity verification', max_length=64)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=16)),
                ('name_counter', models.PositiveIntegerField(default=0, help_text='Last collision counter issued for this name')),
                ('download_count', models.PositiveIntegerField(default=0)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('last_accessed_at', models.DateTimeField(auto_now_add=True)),
                ('modified_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['uploaded_at', 'id'],
                'indexes': [models.Index(fields=['owner', 'uploaded_at'], name='files_owner_uploaded_idx')],
            },
        ),
    ]
