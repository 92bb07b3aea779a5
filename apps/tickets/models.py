# Models:
# 1. Ticket - Support request from a customer
# 2. TicketMessage - Reply / internal note in a ticket's thread

import random
import string
import time

from django.db import models
from django.urls import reverse
from django.conf import settings
from django.utils import timezone


BASE36_DIGITS = string.digits + string.ascii_uppercase


def to_base36(number):
    """to_base36(35) → 'Z', to_base36(36) → '10'"""
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


def generate_ticket_number(now_ms=None):
    """
    'TKT-' + current time in milliseconds (base 36) + 3 random base 36 chars

    e.g. TKT-LQ2J1X8K7ZQ
    """
    prefix = getattr(settings, 'CRM_TICKET_NUMBER_PREFIX', 'TKT')
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = ''.join(random.choice(BASE36_DIGITS) for _ in range(3))
    return f'{prefix}-{to_base36(now_ms)}{suffix}'


class Ticket(models.Model):

    STATUS_CHOICES = [
        ('open', 'Open'),
        ('in_progress', 'In Progress'),
        ('waiting', 'Waiting'),
        ('resolved', 'Resolved'),
        ('closed', 'Closed'),
    ]

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]

    CATEGORY_CHOICES = [
        ('general', 'General'),
        ('billing', 'Billing'),
        ('technical', 'Technical'),
        ('sales', 'Sales'),
        ('complaint', 'Complaint'),
        ('inquiry', 'Inquiry'),
    ]

    RESOLVED_STATUSES = ['resolved', 'closed']

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='tickets')
    contact = models.ForeignKey('contacts.Contact', on_delete=models.SET_NULL, null=True, blank=True, related_name='tickets', help_text='Customer who raised the ticket')

    ticket_number = models.CharField(max_length=30, unique=True, editable=False)
    subject = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open', db_index=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='general')
    assigned_to = models.CharField(max_length=100, blank=True, help_text='Who is handling it')

    resolved_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'status'], name='ticket_owner_status_idx'),
        ]

    def __str__(self):
        return f"{self.ticket_number} - {self.subject}"

    def save(self, *args, **kwargs):
        # Generated once; edits keep the number
        if not self.ticket_number:
            self.ticket_number = generate_ticket_number()
            while Ticket.objects.filter(ticket_number=self.ticket_number).exists():
                self.ticket_number = generate_ticket_number()

        if self.status in self.RESOLVED_STATUSES:
            if not self.resolved_at:
                self.resolved_at = timezone.now()
        else:
            self.resolved_at = None

        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse('tickets:ticket_detail', kwargs={'pk': self.pk})

    def is_resolved(self):
        return self.status in self.RESOLVED_STATUSES

    def change_status(self, new_status):
        """
        Raises:
            ValueError: unknown status
        """
        if new_status not in dict(self.STATUS_CHOICES):
            raise ValueError(f'Invalid status: {new_status}')

        self.status = new_status
        self.save()

    def add_message(self, author, message, is_internal=False, attachments=None):
        return self.messages.create(
            author=author,
            message=message,
            is_internal=is_internal,
            attachments=attachments or [],
        )


class TicketMessage(models.Model):

    ticket = models.ForeignKey(Ticket, on_delete=models.CASCADE, related_name='messages')
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='ticket_messages')

    message = models.TextField()
    is_internal = models.BooleanField(default=False, help_text='Internal notes are not meant for the customer')
    attachments = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Ticket Message'
        verbose_name_plural = 'Ticket Messages'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.ticket.ticket_number}: {self.message[:50]}"
