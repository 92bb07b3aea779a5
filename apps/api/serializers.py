"""
REST API serializers

Every serializer that points at other CRM rows limits those choices to
the requesting user's own rows, so an id from another account is
rejected as "does not exist".
"""

from rest_framework import serializers
from taggit.serializers import TagListSerializerField, TaggitSerializer

from apps.activities.models import Activity
from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.invoices.models import Invoice, calculate_totals, next_invoice_number
from apps.reminders.models import Reminder
from apps.tickets.models import Ticket, TicketMessage


class OwnedModelSerializer(serializers.ModelSerializer):
    """Restricts related-row fields listed in ``owned_fields`` to request.user's rows."""

    owned_fields = {}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        request = self.context.get('request')
        user = getattr(request, 'user', None)

        for field_name, model in self.owned_fields.items():
            if field_name not in self.fields:
                continue
            if user is not None and user.is_authenticated:
                self.fields[field_name].queryset = model.objects.filter(owner=user)
            else:
                self.fields[field_name].queryset = model.objects.none()


class ContactSerializer(TaggitSerializer, serializers.ModelSerializer):
    tags = TagListSerializerField(required=False)

    class Meta:
        model = Contact
        fields = ['id', 'name', 'email', 'phone', 'whatsapp', 'company', 'notes', 'tags', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class DealSerializer(OwnedModelSerializer):
    owned_fields = {'contact': Contact}

    contact_name = serializers.CharField(source='contact.name', read_only=True, default=None)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Deal
        fields = ['id', 'title', 'contact', 'contact_name', 'value', 'status', 'status_display', 'description', 'expected_close_date', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class InvoiceItemSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    price = serializers.DecimalField(max_digits=12, decimal_places=2)


class InvoiceSerializer(OwnedModelSerializer):
    owned_fields = {'contact': Contact, 'deal': Deal}

    items = InvoiceItemSerializer(many=True, required=False)
    invoice_number = serializers.CharField(max_length=50, required=False)

    class Meta:
        model = Invoice
        fields = ['id', 'invoice_number', 'contact', 'deal', 'items', 'tax_rate', 'amount', 'tax', 'total', 'status', 'due_date', 'paid_date', 'notes', 'created_at', 'updated_at']
        read_only_fields = ['id', 'amount', 'tax', 'total', 'paid_date', 'created_at', 'updated_at']

    def validate_invoice_number(self, value):
        owner = self.context['request'].user
        duplicates = Invoice.objects.filter(owner=owner, invoice_number=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('Invoice number already exists')
        return value

    def validate_tax_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError('Tax rate must be between 0 and 100')
        return value

    def validate_items(self, items):
        # Same rule as the web form: a description and a positive quantity
        return [
            {
                'description': item['description'].strip(),
                'quantity': float(item['quantity']),
                'price': float(item['price']),
            }
            for item in items
            if item['description'].strip() and item['quantity'] > 0
        ]

    def validate(self, attrs):
        # Totals must fit the 12 digit amount columns
        items = attrs.get('items', self.instance.items if self.instance is not None else [])
        tax_rate = attrs.get('tax_rate', self.instance.tax_rate if self.instance is not None else 0)
        try:
            calculate_totals(items, tax_rate)
        except ValueError:
            raise serializers.ValidationError({'items': 'Invoice total is too large'})
        return attrs

    def _save(self, invoice, validated_data):
        for attr, value in validated_data.items():
            setattr(invoice, attr, value)
        invoice.recalculate()
        invoice.save()
        return invoice

    def create(self, validated_data):
        owner = validated_data['owner']
        validated_data.setdefault('invoice_number', next_invoice_number(owner))
        return self._save(Invoice(), validated_data)

    def update(self, instance, validated_data):
        was_paid = instance.status == 'paid'
        invoice = self._save(instance, validated_data)
        if invoice.status == 'paid' and not was_paid:
            invoice.announce_paid()
        return invoice


class ReminderSerializer(OwnedModelSerializer):
    owned_fields = {'contact': Contact, 'deal': Deal}

    class Meta:
        model = Reminder
        fields = ['id', 'title', 'description', 'due_date', 'priority', 'contact', 'deal', 'is_completed', 'completed_at', 'created_at', 'updated_at']
        read_only_fields = ['id', 'is_completed', 'completed_at', 'created_at', 'updated_at']


class TicketMessageSerializer(serializers.ModelSerializer):
    author_name = serializers.SerializerMethodField()

    class Meta:
        model = TicketMessage
        fields = ['id', 'message', 'is_internal', 'attachments', 'author', 'author_name', 'created_at']
        read_only_fields = ['id', 'author', 'created_at']

    def get_author_name(self, obj):
        return obj.author.get_full_name() if obj.author else None

    def validate_message(self, value):
        if not value.strip():
            raise serializers.ValidationError('Message cannot be empty')
        return value.strip()


class TicketSerializer(OwnedModelSerializer):
    owned_fields = {'contact': Contact}

    message_count = serializers.IntegerField(source='messages.count', read_only=True)

    class Meta:
        model = Ticket
        fields = ['id', 'ticket_number', 'contact', 'subject', 'description', 'status', 'priority', 'category', 'assigned_to', 'resolved_at', 'message_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'ticket_number', 'resolved_at', 'created_at', 'updated_at']


class ActivitySerializer(OwnedModelSerializer):
    owned_fields = {'contact': Contact, 'deal': Deal}

    class Meta:
        model = Activity
        fields = ['id', 'type', 'title', 'description', 'contact', 'deal', 'created_at']
        read_only_fields = ['id', 'created_at']
