"""
Report figures for the reports page (and its JSON variant)

All figures are computed per owner. A period is the last N days
(7d / 30d / 90d); growth compares it with the N days before it.
"""

import datetime
import math
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Sum
from django.utils import timezone

from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.invoices.models import Invoice
from apps.tickets.models import Ticket


DEFAULT_RANGE = '30d'


def get_range_days(range_key):
    """Number of days for a range key; unknown keys use the default range."""
    ranges = {key: days for key, _label, days in settings.CRM_REPORT_RANGES}
    return ranges.get(range_key, ranges[DEFAULT_RANGE])


def calc_growth(current, previous):
    """
    Percent change from ``previous`` to ``current``, rounded half up

    calc_growth(5, 0)  → 100
    calc_growth(0, 0)  → 0
    calc_growth(3, 4)  → -25
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return math.floor(float(current - previous) / float(previous) * 100 + 0.5)


def _sum_value(queryset, field='value'):
    return queryset.aggregate(total=Sum(field))['total'] or Decimal('0')


def month_starts(now, count=6):
    """First instant of each of the last ``count`` calendar months (oldest first), plus the next month."""
    local_now = timezone.localtime(now)
    year, month = local_now.year, local_now.month

    starts = []
    for offset in range(count - 1, -2, -1):
        m = month - offset
        y = year
        while m <= 0:
            m += 12
            y -= 1
        while m > 12:
            m -= 12
            y += 1
        starts.append(timezone.make_aware(datetime.datetime(y, m, 1), timezone.get_current_timezone()))
    return starts


def _by_status(queryset, choices, field='status'):
    counts = {
        row[field]: row['count']
        for row in queryset.values(field).annotate(count=Count('id')).order_by()
    }
    return [
        {'key': key, 'label': label, 'count': counts[key]}
        for key, label in choices
        if counts.get(key)
    ]


def build_report(owner, range_key=DEFAULT_RANGE, now=None):
    now = now or timezone.now()
    days = get_range_days(range_key)
    start = now - datetime.timedelta(days=days)
    prev_start = start - datetime.timedelta(days=days)

    deals = Deal.objects.filter(owner=owner)
    contacts = Contact.objects.filter(owner=owner)
    invoices = Invoice.objects.filter(owner=owner)
    tickets = Ticket.objects.filter(owner=owner)
    won_deals = deals.filter(status='won')

    current_deals = deals.filter(created_at__gte=start).count()
    prev_deals = deals.filter(created_at__gte=prev_start, created_at__lt=start).count()

    current_revenue = _sum_value(won_deals.filter(created_at__gte=start))
    prev_revenue = _sum_value(won_deals.filter(created_at__gte=prev_start, created_at__lt=start))

    current_contacts = contacts.filter(created_at__gte=start).count()
    prev_contacts = contacts.filter(created_at__gte=prev_start, created_at__lt=start).count()

    stats = {
        'total_deals': deals.count(),
        'total_revenue': _sum_value(won_deals),
        'total_contacts': contacts.count(),
        'total_invoices': invoices.count(),
        'total_tickets': tickets.count(),
        'deal_growth': calc_growth(current_deals, prev_deals),
        'revenue_growth': calc_growth(current_revenue, prev_revenue),
        'contact_growth': calc_growth(current_contacts, prev_contacts),
    }

    # Last 6 calendar months
    starts = month_starts(now)
    monthly = []
    for month_start, month_end in zip(starts, starts[1:]):
        month_deals = deals.filter(created_at__gte=month_start, created_at__lt=month_end)
        monthly.append({
            'month': month_start.strftime('%b'),
            'deals': month_deals.count(),
            'revenue': _sum_value(month_deals.filter(status='won')),
            'contacts': contacts.filter(created_at__gte=month_start, created_at__lt=month_end).count(),
            'invoices': invoices.filter(created_at__gte=month_start, created_at__lt=month_end).count(),
        })

    return {
        'range': range_key if range_key in {key for key, _l, _d in settings.CRM_REPORT_RANGES} else DEFAULT_RANGE,
        'days': days,
        'stats': stats,
        'monthly': monthly,
        'deals_by_status': _by_status(deals, Deal.STATUS_CHOICES),
        'invoices_by_status': _by_status(invoices, Invoice.STATUS_CHOICES),
        'tickets_by_status': _by_status(tickets, Ticket.STATUS_CHOICES),
        'tickets_by_category': _by_status(tickets, Ticket.CATEGORY_CHOICES, field='category'),
    }
