import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contacts', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Deal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(help_text='What is being sold', max_length=200)),
                ('value', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Expected deal value', max_digits=12)),
                ('status', models.CharField(choices=[('new', 'New'), ('quoted', 'Quoted'), ('negotiating', 'Negotiating'), ('won', 'Won'), ('lost', 'Lost')], db_index=True, default='new', help_text='Pipeline stage', max_length=20)),
                ('description', models.TextField(blank=True, help_text='Deal details')),
                ('expected_close_date', models.DateField(blank=True, help_text='When is the deal expected to close?', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('contact', models.ForeignKey(blank=True, help_text='Customer for this deal', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='deals', to='contacts.contact')),
                ('owner', models.ForeignKey(help_text='User who owns this deal', on_delete=django.db.models.deletion.CASCADE, related_name='deals', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Deal',
                'verbose_name_plural': 'Deals',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'status'], name='deal_owner_status_idx'),
                    models.Index(fields=['owner', '-created_at'], name='deal_owner_created_idx'),
                ],
            },
        ),
    ]
