import django.db.models.deletion
import taggit.managers
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('taggit', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Contact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Contact's full name", max_length=200)),
                ('email', models.EmailField(blank=True, help_text='Email address (optional)', max_length=254)),
                ('phone', models.CharField(db_index=True, help_text='Phone number in international format', max_length=30)),
                ('whatsapp', models.CharField(blank=True, help_text='WhatsApp number (defaults to phone)', max_length=30)),
                ('company', models.CharField(blank=True, help_text='Company the contact works for', max_length=200)),
                ('notes', models.TextField(blank=True, help_text='General notes about this contact')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When was this contact created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='When was this contact last updated')),
                ('owner', models.ForeignKey(help_text='User who owns this contact', on_delete=django.db.models.deletion.CASCADE, related_name='contacts', to=settings.AUTH_USER_MODEL)),
                ('tags', taggit.managers.TaggableManager(blank=True, help_text='A comma-separated list of tags.', through='taggit.TaggedItem', to='taggit.Tag', verbose_name='Tags')),
            ],
            options={
                'verbose_name': 'Contact',
                'verbose_name_plural': 'Contacts',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', '-created_at'], name='contact_owner_created_idx'),
                    models.Index(fields=['owner', 'name'], name='contact_owner_name_idx'),
                ],
            },
        ),
    ]
