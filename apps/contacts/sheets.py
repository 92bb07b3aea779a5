from apps.core.importing import SheetConfig
from apps.core.spreadsheets import ColumnMapping, to_tags

from .models import Contact


class ContactSheet(SheetConfig):
    entity = 'contacts'
    verbose_name = 'contacts'

    mappings = [
        ColumnMapping('name', 'Name', required=True),
        ColumnMapping('phone', 'Phone', required=True),
        ColumnMapping('email', 'Email'),
        ColumnMapping('whatsapp', 'WhatsApp'),
        ColumnMapping('company', 'Company'),
        ColumnMapping('notes', 'Notes'),
        ColumnMapping('tags', 'Tags', transform=to_tags),
    ]

    export_columns = [
        ('Name', 'name'),
        ('Phone', 'phone'),
        ('Email', 'email'),
        ('WhatsApp', 'whatsapp'),
        ('Company', 'company'),
        ('Tags', lambda contact: contact.get_tag_list()),
        ('Notes', 'notes'),
        ('Created At', 'created_at'),
    ]

    template_example = ['John Doe', '+1234567890', 'john@example.com', '+1234567890', 'Acme Inc', 'Met at conference', 'client,vip']

    list_url = 'contacts:contact_list'
    upload_url = 'contacts:contact_import'
    mapping_url = 'contacts:contact_import_map'
    template_url = 'contacts:contact_template'

    def get_queryset(self, request):
        return Contact.objects.filter(owner=request.user).prefetch_related('tags').order_by('-created_at')

    def build_object(self, owner, record):
        return Contact(
            owner=owner,
            name=record['name'],
            phone=record['phone'],
            email=record.get('email', '').lower(),
            whatsapp=record.get('whatsapp', ''),
            company=record.get('company', ''),
            notes=record.get('notes', ''),
        )

    def after_save(self, obj, record):
        if record.get('tags'):
            obj.tags.set(record['tags'])
