from decimal import Decimal

from django.shortcuts import render
from django.contrib.auth.decorators import login_required
from django.db.models import Sum
from django.http import JsonResponse
from django.utils import timezone
from django.conf import settings

from apps.accounts.decorators import is_ajax
from apps.activities.models import Activity
from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.invoices.models import Invoice
from apps.reminders.models import Reminder
from .reports import build_report, DEFAULT_RANGE


@login_required
def dashboard_view(request):
    """
    Main dashboard view
    Key figures, recent deals, upcoming reminders and latest activity
    for the logged-in user's data only
    """
    owner = request.user
    now = timezone.now()

    deals_qs = Deal.objects.filter(owner=owner)
    invoices_qs = Invoice.objects.filter(owner=owner)
    reminders_qs = Reminder.objects.filter(owner=owner)

    # 1. Key Metrics
    stats = {
        'total_contacts': Contact.objects.filter(owner=owner).count(),
        'total_deals': deals_qs.count(),
        'total_value': deals_qs.aggregate(total=Sum('value'))['total'] or Decimal('0'),
        'won_deals': deals_qs.filter(status='won').count(),
        'total_invoices': invoices_qs.count(),
        'paid_revenue': invoices_qs.filter(status='paid').aggregate(total=Sum('total'))['total'] or Decimal('0'),
        'pending_reminders': reminders_qs.filter(is_completed=False).count(),
    }

    # 2. Recent Activity
    recent_deals = deals_qs.select_related('contact').order_by('-created_at')[:5]
    upcoming_reminders = reminders_qs.filter(
        is_completed=False,
        due_date__gte=now
    ).select_related('contact').order_by('due_date')[:5]
    recent_activities = Activity.objects.filter(owner=owner).select_related('contact', 'deal').order_by('-created_at')[:5]

    context = {
        'stats': stats,
        'recent_deals': recent_deals,
        'upcoming_reminders': upcoming_reminders,
        'recent_activities': recent_activities,
        'active_page': 'dashboard',
    }

    return render(request, 'core/dashboard.html', context)


def _json_ready(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: _json_ready(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_ready(v) for v in value]
    return value


@login_required
def reports_view(request):
    range_key = request.GET.get('range', DEFAULT_RANGE)
    report = build_report(request.user, range_key)

    if is_ajax(request) or request.GET.get('format') == 'json':
        return JsonResponse(_json_ready(report))

    context = {
        'report': report,
        'ranges': settings.CRM_REPORT_RANGES,
        'active_page': 'reports',
    }

    return render(request, 'core/reports.html', context)
