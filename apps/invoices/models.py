from decimal import Decimal
from urllib.parse import quote

from django.db import models
from django.urls import reverse
from django.conf import settings
from django.utils import timezone

from apps.core.notifications import notify
from apps.core.spreadsheets import to_number, to_amount


def money(value):
    """
    Round to cents, half up: 10.005 → 10.01

    Raises:
        ValueError: more than the 12 digit amount columns hold
    """
    return to_amount(value)


def calculate_totals(items, tax_rate):
    """
    Args:
        items: [{'description': ..., 'quantity': ..., 'price': ...}, ...]
        tax_rate: percent, e.g. 14 for 14%

    Returns:
        tuple: (amount, tax, total) as Decimals rounded to cents

    Non-numeric quantities, prices or tax rates count as 0.

    Raises:
        ValueError: a total does not fit the amount columns
    """
    amount = sum(
        (to_number(item.get('quantity')) * to_number(item.get('price')) for item in items or []),
        Decimal('0')
    )
    tax = amount * to_number(tax_rate) / Decimal('100')
    amount, tax = money(amount), money(tax)
    return amount, tax, money(amount + tax)


def next_invoice_number(owner):
    """
    'INV-001' style number: prefix + (owner's invoice count + 1), padded to 3

    Skips numbers already taken (e.g. after an import or a deletion).
    """
    prefix = getattr(settings, 'CRM_INVOICE_NUMBER_PREFIX', 'INV')
    existing = Invoice.objects.filter(owner=owner)
    next_number = existing.count() + 1

    while True:
        candidate = f'{prefix}-{next_number:03d}'
        if not existing.filter(invoice_number=candidate).exists():
            return candidate
        next_number += 1


class Invoice(models.Model):

    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('sent', 'Sent'),
        ('paid', 'Paid'),
        ('overdue', 'Overdue'),
        ('cancelled', 'Cancelled'),
    ]

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='invoices', help_text='User who issued this invoice')
    contact = models.ForeignKey('contacts.Contact', on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices', help_text='Customer being billed')
    deal = models.ForeignKey('deals.Deal', on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices', help_text='Deal this invoice belongs to')

    invoice_number = models.CharField(max_length=50, help_text='Unique per user, e.g. INV-001')
    items = models.JSONField(default=list, blank=True, help_text='Line items: description, quantity, price')

    # Money
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'), help_text='Tax rate in percent')
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'), help_text='Sum of line items')
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft', db_index=True)
    due_date = models.DateField(help_text='Payment due date')
    paid_date = models.DateTimeField(null=True, blank=True, help_text='Set automatically when marked as paid')
    notes = models.TextField(blank=True, help_text='Payment terms, bank details...')

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Invoice'
        verbose_name_plural = 'Invoices'
        ordering = ['-created_at']
        unique_together = ['owner', 'invoice_number']
        indexes = [
            models.Index(fields=['owner', 'status'], name='invoice_owner_status_idx'),
            models.Index(fields=['due_date'], name='invoice_due_date_idx'),
        ]

    def __str__(self):
        return f"{self.invoice_number} - {self.total}"

    def save(self, *args, **kwargs):
        # paid_date follows the status
        if self.status == 'paid':
            if not self.paid_date:
                self.paid_date = timezone.now()
        else:
            self.paid_date = None
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse('invoices:invoice_detail', kwargs={'pk': self.pk})

    def recalculate(self):
        """
        Refresh amount / tax / total from the line items and tax rate

        Invoices without line items (e.g. imported ones) keep their totals.
        """
        if self.items:
            self.amount, self.tax, self.total = calculate_totals(self.items, self.tax_rate)

    def get_line_items(self):
        """Line items with their computed line total, for templates."""
        return [
            {
                'description': item.get('description', ''),
                'quantity': to_number(item.get('quantity')),
                'price': money(item.get('price')),
                'line_total': money(to_number(item.get('quantity')) * to_number(item.get('price'))),
            }
            for item in self.items or []
        ]

    def is_overdue(self):
        return self.status in ['sent', 'overdue'] and self.due_date < timezone.localdate()

    def set_status(self, new_status):
        """
        Change the status; 'paid' stamps paid_date, anything else clears it

        Raises:
            ValueError: unknown status
        """
        if new_status not in dict(self.STATUS_CHOICES):
            raise ValueError(f'Invalid status: {new_status}')

        was_paid = self.status == 'paid'
        self.status = new_status
        self.save()

        if new_status == 'paid' and not was_paid:
            self.announce_paid()

    def announce_paid(self):
        notify(
            self.owner,
            'invoice',
            f'Invoice {self.invoice_number} paid',
            f'Invoice {self.invoice_number} ({self.total}) was marked as paid.'
        )

    def whatsapp_share_url(self):
        """wa.me link with a ready-made message, or None without a customer phone."""
        if not self.contact:
            return None
        digits = self.contact.whatsapp_digits()
        if not digits:
            return None

        message = (
            f"Hi {self.contact.name},\n\n"
            f"Here is your invoice {self.invoice_number} for {self.total}.\n\n"
            f"Due date: {self.due_date.isoformat()}\n\n"
            f"Thank you for your business!"
        )
        return f'https://wa.me/{digits}?text={quote(message)}'
