import logging

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db.models import Q, Count
from django.core.paginator import Paginator
from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax
from apps.contacts.models import Contact
from .forms import TicketForm, TicketMessageForm
from .models import Ticket

logger = logging.getLogger(__name__)


def ticket_stats(tickets):
    """Counts behind the cards on top of the list: open, in progress, resolved (+ closed)."""
    counts = {
        row['status']: row['count']
        for row in tickets.values('status').annotate(count=Count('id')).order_by()
    }
    return {
        'total': sum(counts.values()),
        'open': counts.get('open', 0),
        'in_progress': counts.get('in_progress', 0),
        'waiting': counts.get('waiting', 0),
        'resolved': counts.get('resolved', 0) + counts.get('closed', 0),
    }


@login_required
def ticket_list_view(request):
    all_tickets = Ticket.objects.filter(owner=request.user)
    tickets = all_tickets.select_related('contact').annotate(message_count=Count('messages')).order_by('-created_at')

    current_tab = request.GET.get('status', 'all')
    if current_tab != 'all' and current_tab in dict(Ticket.STATUS_CHOICES):
        tickets = tickets.filter(status=current_tab)
    else:
        current_tab = 'all'

    search_query = request.GET.get('q', '').strip()
    if search_query:
        tickets = tickets.filter(
            Q(ticket_number__icontains=search_query) |
            Q(subject__icontains=search_query) |
            Q(contact__name__icontains=search_query)
        )

    paginator = Paginator(tickets, settings.CRM_PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'tickets': page_obj,
        'page_obj': page_obj,
        'current_tab': current_tab,
        'search_query': search_query,
        'stats': ticket_stats(all_tickets),
        'status_choices': Ticket.STATUS_CHOICES,
        'is_paginated': page_obj.has_other_pages(),
        'page_range': paginator.get_elided_page_range(
            page_obj.number,
            on_each_side=2,
            on_ends=1
        ),
        'active_page': 'tickets',
    }

    return render(request, 'tickets/ticket_list.html', context)


@login_required
def ticket_detail_view(request, pk):
    ticket = get_object_or_404(Ticket.objects.select_related('contact'), pk=pk, owner=request.user)

    context = {
        'ticket': ticket,
        'thread': ticket.messages.select_related('author').order_by('created_at'),
        'message_form': TicketMessageForm(),
        'status_choices': Ticket.STATUS_CHOICES,
        'active_page': 'tickets',
    }

    return render(request, 'tickets/ticket_detail.html', context)


@login_required
@require_POST
def ticket_reply_view(request, pk):
    ticket = get_object_or_404(Ticket, pk=pk, owner=request.user)
    form = TicketMessageForm(request.POST)

    if not form.is_valid():
        error = form.errors.get('message', ['Invalid message'])[0]
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': error}, status=400)
        messages.error(request, error)
        return redirect('tickets:ticket_detail', pk=ticket.pk)

    try:
        reply = ticket.add_message(
            request.user,
            form.cleaned_data['message'],
            is_internal=form.cleaned_data.get('is_internal', False)
        )
    except Exception as e:
        logger.exception("Adding message to ticket %s failed", ticket.pk)
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=500)
        messages.error(request, f'Error sending message: {str(e)}')
        return redirect('tickets:ticket_detail', pk=ticket.pk)

    if is_ajax(request):
        return JsonResponse({
            'success': True,
            'message': {
                'id': reply.id,
                'message': reply.message,
                'is_internal': reply.is_internal,
                'author': request.user.get_full_name(),
                'created_at': reply.created_at.isoformat(),
            }
        })

    return redirect('tickets:ticket_detail', pk=ticket.pk)


@login_required
def ticket_create_view(request):
    if request.method == 'POST':
        form = TicketForm(request.POST, owner=request.user)

        if form.is_valid():
            try:
                ticket = form.save(commit=False)
                ticket.owner = request.user
                ticket.save()
            except Exception as e:
                logger.exception("Creating ticket failed for %s", request.user.email)
                messages.error(request, f'Error creating ticket: {str(e)}')
            else:
                messages.success(request, f'Ticket {ticket.ticket_number} created successfully')
                return redirect('tickets:ticket_detail', pk=ticket.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        initial = {'status': 'open', 'priority': 'medium', 'category': 'general'}
        contact_id = request.GET.get('contact', '')
        if contact_id.isdigit() and Contact.objects.filter(pk=contact_id, owner=request.user).exists():
            initial['contact'] = contact_id
        form = TicketForm(initial=initial, owner=request.user)

    context = {
        'form': form,
        'form_title': 'New Ticket',
        'active_page': 'tickets',
    }

    return render(request, 'tickets/ticket_form.html', context)


@login_required
def ticket_edit_view(request, pk):
    ticket = get_object_or_404(Ticket, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = TicketForm(request.POST, instance=ticket, owner=request.user)

        if form.is_valid():
            try:
                ticket = form.save()
            except Exception as e:
                logger.exception("Updating ticket %s failed", ticket.pk)
                messages.error(request, f'Error updating ticket: {str(e)}')
            else:
                messages.success(request, f'Ticket {ticket.ticket_number} updated successfully')
                return redirect('tickets:ticket_detail', pk=ticket.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        form = TicketForm(instance=ticket, owner=request.user)

    context = {
        'form': form,
        'ticket': ticket,
        'form_title': f'Edit Ticket: {ticket.ticket_number}',
        'active_page': 'tickets',
    }

    return render(request, 'tickets/ticket_form.html', context)


@login_required
@require_POST
def ticket_change_status_view(request, pk):
    ticket = get_object_or_404(Ticket, pk=pk, owner=request.user)
    new_status = request.POST.get('status')

    if new_status and new_status in dict(Ticket.STATUS_CHOICES):
        ticket.change_status(new_status)

        if is_ajax(request):
            return JsonResponse({
                'success': True,
                'status': ticket.status,
                'status_display': ticket.get_status_display(),
                'resolved_at': ticket.resolved_at.isoformat() if ticket.resolved_at else None,
            })

        messages.success(request, f'Status changed to "{ticket.get_status_display()}"')
        return redirect('tickets:ticket_detail', pk=ticket.pk)

    if is_ajax(request):
        return JsonResponse({'success': False, 'error': 'Invalid status'}, status=400)

    messages.error(request, 'Invalid status')
    return redirect('tickets:ticket_detail', pk=ticket.pk)


@login_required
@require_POST
def ticket_delete_view(request, pk):
    ticket = get_object_or_404(Ticket, pk=pk, owner=request.user)
    ticket_number = ticket.ticket_number

    try:
        ticket.delete()
    except Exception as e:
        logger.exception("Deleting ticket %s failed", pk)
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=500)
        messages.error(request, f'Error deleting ticket: {str(e)}')
        return redirect('tickets:ticket_detail', pk=pk)

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Ticket {ticket_number} deleted successfully')
    return redirect('tickets:ticket_list')
