import logging
from collections import defaultdict

from celery import shared_task
from django.utils import timezone

from apps.core.notifications import notify
from .models import Invoice

logger = logging.getLogger(__name__)


@shared_task
def mark_overdue_invoices():
    """
    Flip sent invoices whose due date has passed to 'overdue'
    and tell each owner which of their invoices changed.
    Scheduled in config/celery.py
    """
    today = timezone.localdate()
    invoices = Invoice.objects.filter(status='sent', due_date__lt=today).select_related('owner')

    by_owner = defaultdict(list)
    for invoice in invoices:
        by_owner[invoice.owner].append(invoice)

    marked = 0
    for owner, owner_invoices in by_owner.items():
        Invoice.objects.filter(pk__in=[invoice.pk for invoice in owner_invoices]).update(status='overdue', updated_at=timezone.now())
        marked += len(owner_invoices)

        numbers = ', '.join(invoice.invoice_number for invoice in owner_invoices)
        notify(
            owner,
            'invoice',
            f'{len(owner_invoices)} invoice(s) overdue',
            f'These invoices are now overdue: {numbers}'
        )

    logger.info("Marked %d invoice(s) overdue", marked)
    return f'{marked} invoice(s) marked overdue.'
