from decimal import Decimal

from apps.core.importing import SheetConfig
from apps.core.spreadsheets import ColumnMapping, to_number, to_choice, to_date

from .models import Invoice, money


class InvoiceSheet(SheetConfig):
    entity = 'invoices'
    verbose_name = 'invoices'

    mappings = [
        ColumnMapping('invoice_number', 'Invoice #', header='Invoice Number', required=True),
        ColumnMapping('amount', 'Amount', transform=to_number),
        ColumnMapping('tax', 'Tax', transform=to_number),
        ColumnMapping('due_date', 'Due Date', required=True, transform=to_date),
        ColumnMapping('status', 'Status', transform=to_choice(Invoice.STATUS_CHOICES, 'draft')),
        ColumnMapping('notes', 'Notes'),
    ]

    export_columns = [
        ('Invoice #', 'invoice_number'),
        ('Customer', 'contact.name'),
        ('Amount', 'amount'),
        ('Tax', 'tax'),
        ('Total', 'total'),
        ('Status', lambda invoice: invoice.get_status_display()),
        ('Due Date', 'due_date'),
        ('Paid Date', 'paid_date'),
        ('Created At', 'created_at'),
    ]

    template_example = ['INV-001', '1000', '100', '2024-03-15', 'draft', 'Payment terms: Net 30']

    list_url = 'invoices:invoice_list'
    upload_url = 'invoices:invoice_import'
    mapping_url = 'invoices:invoice_import_map'
    template_url = 'invoices:invoice_template'

    def get_queryset(self, request):
        return Invoice.objects.filter(owner=request.user).select_related('contact').order_by('-created_at')

    def build_object(self, owner, record):
        number = record['invoice_number']
        if Invoice.objects.filter(owner=owner, invoice_number=number).exists():
            raise ValueError(f'Invoice number {number} already exists')

        # Imported invoices carry totals only, no line items
        amount = money(record.get('amount', Decimal('0')))
        tax = money(record.get('tax', Decimal('0')))
        return Invoice(
            owner=owner,
            invoice_number=number,
            items=[],
            amount=amount,
            tax=tax,
            total=money(amount + tax),
            due_date=record['due_date'],
            status=record.get('status', 'draft'),
            notes=record.get('notes', ''),
        )
