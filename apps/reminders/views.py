import logging
import datetime

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.paginator import Paginator
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax
from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.core import importing
from .forms import ReminderForm
from .models import Reminder
from .sheets import ReminderSheet

logger = logging.getLogger(__name__)


@login_required
def reminder_list_view(request):
    reminders = Reminder.objects.filter(owner=request.user)
    today = timezone.localdate()

    current_filter = request.GET.get('filter', 'all')
    if current_filter not in dict(Reminder.FILTER_CHOICES):
        current_filter = 'all'

    counts = {
        'all': reminders.count(),
        'pending': reminders.pending().count(),
        'completed': reminders.completed().count(),
        'today': reminders.due_today(today).count(),
        'overdue': reminders.overdue(today).count(),
    }

    filtered = reminders.for_filter(current_filter, today).select_related('contact', 'deal').order_by('due_date')

    paginator = Paginator(filtered, settings.CRM_PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'reminders': page_obj,
        'page_obj': page_obj,
        'current_filter': current_filter,
        'filter_choices': Reminder.FILTER_CHOICES,
        'counts': counts,
        'is_paginated': page_obj.has_other_pages(),
        'page_range': paginator.get_elided_page_range(
            page_obj.number,
            on_each_side=2,
            on_ends=1
        ),
        'import_results': request.session.pop('import_results', None),
        'active_page': 'reminders',
    }

    return render(request, 'reminders/reminder_list.html', context)


@login_required
def reminder_create_view(request):
    if request.method == 'POST':
        form = ReminderForm(request.POST, owner=request.user)

        if form.is_valid():
            try:
                reminder = form.save(commit=False)
                reminder.owner = request.user
                reminder.save()
            except Exception as e:
                logger.exception("Creating reminder failed for %s", request.user.email)
                messages.error(request, f'Error creating reminder: {str(e)}')
            else:
                messages.success(request, f'Reminder "{reminder.title}" created successfully')
                return redirect('reminders:reminder_list')
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        # Tomorrow 9:00 unless the caller says otherwise
        tomorrow = timezone.localdate() + datetime.timedelta(days=1)
        initial = {
            'priority': 'medium',
            'due_date': timezone.make_aware(datetime.datetime.combine(tomorrow, datetime.time(9, 0))),
        }

        contact_id = request.GET.get('contact', '')
        if contact_id.isdigit() and Contact.objects.filter(pk=contact_id, owner=request.user).exists():
            initial['contact'] = contact_id

        deal_id = request.GET.get('deal', '')
        deal = Deal.objects.filter(pk=deal_id, owner=request.user).first() if deal_id.isdigit() else None
        if deal:
            initial['deal'] = deal.pk
            if deal.contact_id:
                initial['contact'] = deal.contact_id

        form = ReminderForm(initial=initial, owner=request.user)

    context = {
        'form': form,
        'form_title': 'New Reminder',
        'active_page': 'reminders',
    }

    return render(request, 'reminders/reminder_form.html', context)


@login_required
def reminder_edit_view(request, pk):
    reminder = get_object_or_404(Reminder, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = ReminderForm(request.POST, instance=reminder, owner=request.user)

        if form.is_valid():
            try:
                reminder = form.save()
            except Exception as e:
                logger.exception("Updating reminder %s failed", reminder.pk)
                messages.error(request, f'Error updating reminder: {str(e)}')
            else:
                messages.success(request, f'Reminder "{reminder.title}" updated successfully')
                return redirect('reminders:reminder_list')
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        form = ReminderForm(instance=reminder, owner=request.user)

    context = {
        'form': form,
        'reminder': reminder,
        'form_title': f'Edit Reminder: {reminder.title}',
        'active_page': 'reminders',
    }

    return render(request, 'reminders/reminder_form.html', context)


@login_required
@require_POST
def reminder_toggle_view(request, pk):
    reminder = get_object_or_404(Reminder, pk=pk, owner=request.user)
    is_completed = reminder.toggle_complete()

    if is_ajax(request):
        return JsonResponse({
            'success': True,
            'is_completed': is_completed,
            'completed_at': reminder.completed_at.isoformat() if reminder.completed_at else None,
        })

    if is_completed:
        messages.success(request, f'Reminder "{reminder.title}" marked as done')
    else:
        messages.info(request, f'Reminder "{reminder.title}" re-opened')
    return redirect('reminders:reminder_list')


@login_required
@require_POST
def reminder_delete_view(request, pk):
    reminder = get_object_or_404(Reminder, pk=pk, owner=request.user)
    reminder_title = reminder.title

    try:
        reminder.delete()
    except Exception as e:
        logger.exception("Deleting reminder %s failed", pk)
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=500)
        messages.error(request, f'Error deleting reminder: {str(e)}')
        return redirect('reminders:reminder_list')

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Reminder "{reminder_title}" deleted successfully')
    return redirect('reminders:reminder_list')


# IMPORT / EXPORT
@login_required
def reminder_export_view(request):
    return importing.export_view(request, ReminderSheet())


@login_required
def reminder_template_view(request):
    return importing.template_view(request, ReminderSheet())


@login_required
def reminder_import_view(request):
    return importing.upload_view(request, ReminderSheet())


@login_required
def reminder_import_map_view(request):
    return importing.mapping_view(request, ReminderSheet())
