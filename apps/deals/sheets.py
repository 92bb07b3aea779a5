from apps.core.importing import SheetConfig
from apps.core.spreadsheets import ColumnMapping, to_number, to_amount, to_choice, to_date

from .models import Deal


class DealSheet(SheetConfig):
    entity = 'deals'
    verbose_name = 'deals'

    mappings = [
        ColumnMapping('title', 'Title', required=True),
        ColumnMapping('value', 'Value', transform=to_number),
        ColumnMapping('status', 'Status', transform=to_choice(Deal.STATUS_CHOICES, 'new')),
        ColumnMapping('description', 'Description'),
        ColumnMapping('expected_close_date', 'Close Date', header='Expected Close Date', transform=to_date),
    ]

    export_columns = [
        ('Title', 'title'),
        ('Value', 'value'),
        ('Status', lambda deal: deal.get_status_display()),
        ('Contact', 'contact.name'),
        ('Close Date', 'expected_close_date'),
        ('Description', 'description'),
        ('Created At', 'created_at'),
    ]

    template_example = ['Website Redesign', '5000', 'new', 'Full website overhaul', '2024-03-15']

    list_url = 'deals:deal_list'
    upload_url = 'deals:deal_import'
    mapping_url = 'deals:deal_import_map'
    template_url = 'deals:deal_template'

    def get_queryset(self, request):
        return Deal.objects.filter(owner=request.user).select_related('contact').order_by('-created_at')

    def build_object(self, owner, record):
        return Deal(
            owner=owner,
            title=record['title'],
            value=to_amount(record.get('value')),
            status=record.get('status', 'new'),
            description=record.get('description', ''),
            expected_close_date=record.get('expected_close_date'),
        )
