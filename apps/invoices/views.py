import logging
import datetime
from decimal import Decimal

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db import transaction
from django.db.models import Q, Sum
from django.core.paginator import Paginator
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax
from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.core import importing
from .forms import InvoiceForm, InvoiceItemFormSet, InvoiceFilterForm, items_from_formset, formset_initial
from .models import Invoice, next_invoice_number
from .sheets import InvoiceSheet

logger = logging.getLogger(__name__)


def _status_totals(invoices):
    totals = {
        row['status']: row['total'] or Decimal('0')
        for row in invoices.values('status').annotate(total=Sum('total')).order_by()
    }
    return {
        'by_status': totals,
        'pending': totals.get('sent', Decimal('0')) + totals.get('overdue', Decimal('0')),
        'paid': totals.get('paid', Decimal('0')),
        'overdue': totals.get('overdue', Decimal('0')),
    }


@login_required
def invoice_list_view(request):
    invoices = Invoice.objects.filter(owner=request.user).select_related('contact', 'deal').order_by('-created_at')

    filter_form = InvoiceFilterForm(request.GET)
    search_query = ''

    if filter_form.is_valid():
        search_query = filter_form.cleaned_data.get('q', '').strip()
        if search_query:
            invoices = invoices.filter(
                Q(invoice_number__icontains=search_query) |
                Q(contact__name__icontains=search_query) |
                Q(notes__icontains=search_query)
            )

        if filter_form.cleaned_data.get('status'):
            invoices = invoices.filter(status=filter_form.cleaned_data['status'])

    paginator = Paginator(invoices, settings.CRM_PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'invoices': page_obj,
        'page_obj': page_obj,
        'filter_form': filter_form,
        'search_query': search_query,
        'total_count': paginator.count,
        'totals': _status_totals(Invoice.objects.filter(owner=request.user)),
        'status_choices': Invoice.STATUS_CHOICES,
        'is_paginated': page_obj.has_other_pages(),
        'page_range': paginator.get_elided_page_range(
            page_obj.number,
            on_each_side=2,
            on_ends=1
        ),
        'import_results': request.session.pop('import_results', None),
        'active_page': 'invoices',
    }

    return render(request, 'invoices/invoice_list.html', context)


@login_required
def invoice_detail_view(request, pk):
    invoice = get_object_or_404(Invoice.objects.select_related('contact', 'deal'), pk=pk, owner=request.user)

    context = {
        'invoice': invoice,
        'line_items': invoice.get_line_items(),
        'whatsapp_url': invoice.whatsapp_share_url(),
        'status_choices': Invoice.STATUS_CHOICES,
        'active_page': 'invoices',
    }

    return render(request, 'invoices/invoice_detail.html', context)


@login_required
def invoice_preview_view(request, pk):
    """Printable invoice page"""
    invoice = get_object_or_404(Invoice.objects.select_related('contact', 'deal'), pk=pk, owner=request.user)

    context = {
        'invoice': invoice,
        'line_items': invoice.get_line_items(),
        'whatsapp_url': invoice.whatsapp_share_url(),
        'issuer': request.user,
    }

    return render(request, 'invoices/invoice_preview.html', context)


def _save_invoice(form, formset, owner):
    """Save header + line items and recompute the totals in one go."""
    with transaction.atomic():
        invoice = form.save(commit=False)
        invoice.owner = owner
        invoice.items = items_from_formset(formset)
        invoice.recalculate()
        invoice.save()
    return invoice


@login_required
def invoice_create_view(request):
    if request.method == 'POST':
        form = InvoiceForm(request.POST, owner=request.user)
        formset = InvoiceItemFormSet(request.POST, prefix='items')

        if form.is_valid() and formset.is_valid():
            try:
                invoice = _save_invoice(form, formset, request.user)
            except Exception as e:
                logger.exception("Creating invoice failed for %s", request.user.email)
                messages.error(request, f'Error creating invoice: {str(e)}')
            else:
                messages.success(request, f'Invoice {invoice.invoice_number} created successfully')
                return redirect('invoices:invoice_detail', pk=invoice.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        initial = {
            'invoice_number': next_invoice_number(request.user),
            'status': 'draft',
            'due_date': timezone.localdate() + datetime.timedelta(days=30),
            'tax_rate': '0',
        }

        contact_id = request.GET.get('contact', '')
        if contact_id.isdigit() and Contact.objects.filter(pk=contact_id, owner=request.user).exists():
            initial['contact'] = contact_id

        # Billing a deal defaults to one line item for its value
        formset_data = []
        deal_id = request.GET.get('deal', '')
        deal = Deal.objects.filter(pk=deal_id, owner=request.user).first() if deal_id.isdigit() else None
        if deal:
            initial['deal'] = deal.pk
            if deal.contact_id:
                initial['contact'] = deal.contact_id
            formset_data = [{'description': deal.title, 'quantity': 1, 'price': deal.value}]

        form = InvoiceForm(initial=initial, owner=request.user)
        formset = InvoiceItemFormSet(initial=formset_data, prefix='items')

    context = {
        'form': form,
        'formset': formset,
        'form_title': 'New Invoice',
        'active_page': 'invoices',
    }

    return render(request, 'invoices/invoice_form.html', context)


@login_required
def invoice_edit_view(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk, owner=request.user)
    was_paid = invoice.status == 'paid'

    if request.method == 'POST':
        form = InvoiceForm(request.POST, instance=invoice, owner=request.user)
        formset = InvoiceItemFormSet(request.POST, prefix='items')

        if form.is_valid() and formset.is_valid():
            try:
                invoice = _save_invoice(form, formset, request.user)
                if invoice.status == 'paid' and not was_paid:
                    invoice.announce_paid()
            except Exception as e:
                logger.exception("Updating invoice %s failed", invoice.pk)
                messages.error(request, f'Error updating invoice: {str(e)}')
            else:
                messages.success(request, f'Invoice {invoice.invoice_number} updated successfully')
                return redirect('invoices:invoice_detail', pk=invoice.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        form = InvoiceForm(instance=invoice, owner=request.user)
        formset = InvoiceItemFormSet(initial=formset_initial(invoice), prefix='items')

    context = {
        'form': form,
        'formset': formset,
        'invoice': invoice,
        'form_title': f'Edit Invoice: {invoice.invoice_number}',
        'active_page': 'invoices',
    }

    return render(request, 'invoices/invoice_form.html', context)


@login_required
@require_POST
def invoice_change_status_view(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk, owner=request.user)
    new_status = request.POST.get('status')

    if new_status and new_status in dict(Invoice.STATUS_CHOICES):
        invoice.set_status(new_status)

        if is_ajax(request):
            return JsonResponse({
                'success': True,
                'status': invoice.status,
                'status_display': invoice.get_status_display(),
                'paid_date': invoice.paid_date.isoformat() if invoice.paid_date else None,
            })

        messages.success(request, f'Invoice marked as "{invoice.get_status_display()}"')
        return redirect('invoices:invoice_detail', pk=invoice.pk)

    if is_ajax(request):
        return JsonResponse({'success': False, 'error': 'Invalid status'}, status=400)

    messages.error(request, 'Invalid status')
    return redirect('invoices:invoice_detail', pk=invoice.pk)


@login_required
@require_POST
def invoice_delete_view(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk, owner=request.user)
    invoice_number = invoice.invoice_number

    try:
        invoice.delete()
    except Exception as e:
        logger.exception("Deleting invoice %s failed", pk)
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=500)
        messages.error(request, f'Error deleting invoice: {str(e)}')
        return redirect('invoices:invoice_detail', pk=pk)

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Invoice {invoice_number} deleted successfully')
    return redirect('invoices:invoice_list')


# IMPORT / EXPORT
@login_required
def invoice_export_view(request):
    return importing.export_view(request, InvoiceSheet())


@login_required
def invoice_template_view(request):
    return importing.template_view(request, InvoiceSheet())


@login_required
def invoice_import_view(request):
    return importing.upload_view(request, InvoiceSheet())


@login_required
def invoice_import_map_view(request):
    return importing.mapping_view(request, InvoiceSheet())
