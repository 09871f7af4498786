import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('blogs', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Attachment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file', models.FileField(help_text='Path in storage: {blog_id}/file.ext', max_length=255, upload_to='')),
                ('original_name', models.CharField(blank=True, default='', help_text='Filename as uploaded by the client', max_length=255)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('mime_type', models.CharField(max_length=255)),
                ('checksum_sha256', models.CharField(help_text='SHA256 hash for integrity verification', max_length=64)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('blog', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attachments', to='blogs.blog')),
            ],
            options={
                'verbose_name': 'Attachment',
                'verbose_name_plural': 'Attachments',
                'ordering': ['-uploaded_at'],
                'constraints': [
                    models.UniqueConstraint(fields=('blog', 'file'), name='attachments_blog_path_unique'),
                ],
            },
        ),
    ]
