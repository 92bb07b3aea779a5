import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contacts', '0001_initial'),
        ('deals', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('invoice_number', models.CharField(help_text='Unique per user, e.g. INV-001', max_length=50)),
                ('items', models.JSONField(blank=True, default=list, help_text='Line items: description, quantity, price')),
                ('tax_rate', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Tax rate in percent', max_digits=5)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Sum of line items', max_digits=12)),
                ('tax', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('sent', 'Sent'), ('paid', 'Paid'), ('overdue', 'Overdue'), ('cancelled', 'Cancelled')], db_index=True, default='draft', max_length=20)),
                ('due_date', models.DateField(help_text='Payment due date')),
                ('paid_date', models.DateTimeField(blank=True, help_text='Set automatically when marked as paid', null=True)),
                ('notes', models.TextField(blank=True, help_text='Payment terms, bank details...')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('contact', models.ForeignKey(blank=True, help_text='Customer being billed', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoices', to='contacts.contact')),
                ('deal', models.ForeignKey(blank=True, help_text='Deal this invoice belongs to', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoices', to='deals.deal')),
                ('owner', models.ForeignKey(help_text='User who issued this invoice', on_delete=django.db.models.deletion.CASCADE, related_name='invoices', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Invoice',
                'verbose_name_plural': 'Invoices',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'status'], name='invoice_owner_status_idx'),
                    models.Index(fields=['due_date'], name='invoice_due_date_idx'),
                ],
                'unique_together': {('owner', 'invoice_number')},
            },
        ),
    ]
