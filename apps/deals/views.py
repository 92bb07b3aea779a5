import logging
from decimal import Decimal

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db import transaction
from django.db.models import Q, Sum, Count
from django.core.paginator import Paginator
from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax
from apps.activities.forms import ActivityForm
from apps.contacts.models import Contact
from apps.core import importing
from .forms import DealForm, DealFilterForm
from .models import Deal
from .sheets import DealSheet

logger = logging.getLogger(__name__)


def _filtered_deals(request):
    deals = Deal.objects.filter(owner=request.user).select_related('contact').order_by('-created_at')

    filter_form = DealFilterForm(request.GET)
    search_query = ''

    if filter_form.is_valid():
        search_query = filter_form.cleaned_data.get('q', '').strip()
        if search_query:
            deals = deals.filter(
                Q(title__icontains=search_query) |
                Q(description__icontains=search_query) |
                Q(contact__name__icontains=search_query)
            )

        if filter_form.cleaned_data.get('status'):
            deals = deals.filter(status=filter_form.cleaned_data['status'])

    return deals, filter_form, search_query


@login_required
def deal_list_view(request):
    deals, filter_form, search_query = _filtered_deals(request)

    all_deals = Deal.objects.filter(owner=request.user)
    status_counts = {
        row['status']: row['count']
        for row in all_deals.values('status').annotate(count=Count('id')).order_by()
    }
    totals = {
        # Pipeline value leaves lost deals out
        'pipeline_value': all_deals.exclude(status='lost').aggregate(total=Sum('value'))['total'] or Decimal('0'),
        'won_value': all_deals.filter(status='won').aggregate(total=Sum('value'))['total'] or Decimal('0'),
    }

    paginator = Paginator(deals, settings.CRM_PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'deals': page_obj,
        'page_obj': page_obj,
        'filter_form': filter_form,
        'search_query': search_query,
        'total_count': paginator.count,
        'status_counts': status_counts,
        'status_choices': Deal.STATUS_CHOICES,
        'totals': totals,
        'is_paginated': page_obj.has_other_pages(),
        'page_range': paginator.get_elided_page_range(
            page_obj.number,
            on_each_side=2,
            on_ends=1
        ),
        'import_results': request.session.pop('import_results', None),
        'active_page': 'deals',
    }

    return render(request, 'deals/deal_list.html', context)


@login_required
def deal_kanban_view(request):
    deals, filter_form, search_query = _filtered_deals(request)

    columns = []
    total_count = 0

    for status, label in Deal.STATUS_CHOICES:
        column_deals = [deal for deal in deals if deal.status == status]
        count = len(column_deals)
        total_count += count

        columns.append({
            'status': status,
            'label': label,
            'deals': column_deals,
            'count': count,
            'value': sum((deal.value for deal in column_deals), Decimal('0')),
        })

    context = {
        'columns': columns,
        'filter_form': filter_form,
        'search_query': search_query,
        'total_count': total_count,
        'active_page': 'deals',
    }

    return render(request, 'deals/deal_kanban.html', context)


@login_required
def deal_detail_view(request, pk):
    deal = get_object_or_404(Deal.objects.select_related('contact'), pk=pk, owner=request.user)

    context = {
        'deal': deal,
        'activities': deal.activities.all().order_by('-created_at'),
        'invoices': deal.invoices.all().order_by('-created_at'),
        'reminders': deal.reminders.all().order_by('due_date'),
        'activity_form': ActivityForm(initial={'deal': deal.pk, 'contact': deal.contact_id}, owner=request.user),
        'status_choices': Deal.STATUS_CHOICES,
        'active_page': 'deals',
    }

    return render(request, 'deals/deal_detail.html', context)


@login_required
def deal_create_view(request):
    if request.method == 'POST':
        form = DealForm(request.POST, owner=request.user)

        if form.is_valid():
            try:
                deal = form.save(commit=False)
                deal.owner = request.user
                deal.save()
            except Exception as e:
                logger.exception("Creating deal failed for %s", request.user.email)
                messages.error(request, f'Error creating deal: {str(e)}')
            else:
                messages.success(request, f'Deal "{deal.title}" created successfully')
                return redirect('deals:deal_detail', pk=deal.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        initial = {}
        contact_id = request.GET.get('contact', '')
        if contact_id.isdigit() and Contact.objects.filter(pk=contact_id, owner=request.user).exists():
            initial['contact'] = contact_id
        form = DealForm(initial=initial, owner=request.user)

    context = {
        'form': form,
        'form_title': 'New Deal',
        'active_page': 'deals',
    }

    return render(request, 'deals/deal_form.html', context)


@login_required
def deal_edit_view(request, pk):
    deal = get_object_or_404(Deal, pk=pk, owner=request.user)

    # The form writes onto the instance while validating
    old_status = deal.status

    if request.method == 'POST':
        form = DealForm(request.POST, instance=deal, owner=request.user)

        if form.is_valid():
            try:
                new_status = form.cleaned_data['status']
                with transaction.atomic():
                    deal = form.save(commit=False)
                    deal.status = old_status
                    deal.save()

                    # Status moves go through the model so they reach the timeline
                    deal.change_status(new_status, user=request.user)
            except Exception as e:
                logger.exception("Updating deal %s failed", deal.pk)
                messages.error(request, f'Error updating deal: {str(e)}')
            else:
                messages.success(request, f'Deal "{deal.title}" updated successfully')
                return redirect('deals:deal_detail', pk=deal.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        form = DealForm(instance=deal, owner=request.user)

    context = {
        'form': form,
        'deal': deal,
        'form_title': f'Edit Deal: {deal.title}',
        'active_page': 'deals',
    }

    return render(request, 'deals/deal_form.html', context)


@login_required
@require_POST
def deal_change_status_view(request, pk):
    deal = get_object_or_404(Deal, pk=pk, owner=request.user)
    new_status = request.POST.get('status')

    if new_status and new_status in dict(Deal.STATUS_CHOICES):
        deal.change_status(new_status, user=request.user)

        if is_ajax(request):
            return JsonResponse({
                'success': True,
                'status': deal.status,
                'status_display': deal.get_status_display()
            })

        messages.success(request, f'Status changed to "{deal.get_status_display()}"')
        return redirect('deals:deal_detail', pk=deal.pk)

    if is_ajax(request):
        return JsonResponse({'success': False, 'error': 'Invalid status'}, status=400)

    messages.error(request, 'Invalid status')
    return redirect('deals:deal_detail', pk=deal.pk)


@login_required
@require_POST
def deal_delete_view(request, pk):
    deal = get_object_or_404(Deal, pk=pk, owner=request.user)
    deal_title = deal.title

    try:
        deal.delete()
    except Exception as e:
        logger.exception("Deleting deal %s failed", pk)
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=500)
        messages.error(request, f'Error deleting deal: {str(e)}')
        return redirect('deals:deal_detail', pk=pk)

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Deal "{deal_title}" deleted successfully')
    return redirect('deals:deal_list')


# IMPORT / EXPORT
@login_required
def deal_export_view(request):
    return importing.export_view(request, DealSheet())


@login_required
def deal_template_view(request):
    return importing.template_view(request, DealSheet())


@login_required
def deal_import_view(request):
    return importing.upload_view(request, DealSheet())


@login_required
def deal_import_map_view(request):
    return importing.mapping_view(request, DealSheet())
