import logging

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db.models import Q
from django.core.paginator import Paginator
from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax
from apps.activities.forms import ActivityForm
from apps.core import importing
from .forms import ContactForm, ContactFilterForm
from .models import Contact
from .sheets import ContactSheet

logger = logging.getLogger(__name__)


def _search(queryset, query):
    return queryset.filter(
        Q(name__icontains=query) |
        Q(email__icontains=query) |
        Q(phone__icontains=query) |
        Q(company__icontains=query)
    )


def contact_to_dict(contact):
    return {
        'id': contact.id,
        'name': contact.name,
        'email': contact.email,
        'phone': contact.phone,
        'whatsapp': contact.whatsapp,
        'company': contact.company,
        'notes': contact.notes,
        'tags': contact.get_tag_list(),
        'initials': contact.get_initials(),
        'created_at': contact.created_at.isoformat(),
        'updated_at': contact.updated_at.isoformat(),
    }


@login_required
def contact_list_view(request):
    contacts = Contact.objects.filter(owner=request.user).prefetch_related('tags').order_by('-created_at')

    filter_form = ContactFilterForm(request.GET)
    search_query = ''
    tag = ''

    if filter_form.is_valid():
        search_query = filter_form.cleaned_data.get('q', '').strip()
        tag = filter_form.cleaned_data.get('tag', '').strip()

        if search_query:
            contacts = _search(contacts, search_query)

        if tag:
            contacts = contacts.filter(tags__name__iexact=tag).distinct()

    total_count = contacts.count()

    paginator = Paginator(contacts, settings.CRM_PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'contacts': page_obj,
        'page_obj': page_obj,
        'filter_form': filter_form,
        'search_query': search_query,
        'tag': tag,
        'total_count': total_count,
        'is_paginated': page_obj.has_other_pages(),
        'page_range': paginator.get_elided_page_range(
            page_obj.number,
            on_each_side=2,
            on_ends=1
        ),
        'import_results': request.session.pop('import_results', None),
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_list.html', context)


@login_required
def contact_detail_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk, owner=request.user)

    context = {
        'contact': contact,
        'deals': contact.deals.all().order_by('-created_at'),
        'invoices': contact.invoices.all().order_by('-created_at'),
        'tickets': contact.tickets.all().order_by('-created_at'),
        'reminders': contact.reminders.all().order_by('due_date'),
        'activities': contact.get_activities(),
        'activity_form': ActivityForm(initial={'contact': contact.pk}, owner=request.user),
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_detail.html', context)


@login_required
def contact_json_view(request, pk):
    try:
        contact = Contact.objects.prefetch_related('tags').get(pk=pk, owner=request.user)
    except Contact.DoesNotExist:
        return JsonResponse({'error': 'Contact not found'}, status=404)

    return JsonResponse(contact_to_dict(contact))


@login_required
def contact_search_view(request):
    """Autocomplete for contact pickers: at most 10 matches, ordered by name."""
    query = request.GET.get('q', '').strip()
    contacts = Contact.objects.filter(owner=request.user)

    if query:
        contacts = _search(contacts, query)

    results = [
        {
            'id': contact.id,
            'name': contact.name,
            'email': contact.email,
            'phone': contact.phone,
            'company': contact.company,
        }
        for contact in contacts.order_by('name')[:10]
    ]

    return JsonResponse({'results': results})


@login_required
def contact_create_view(request):
    if request.method == 'POST':
        form = ContactForm(request.POST)

        if form.is_valid():
            try:
                contact = form.save(commit=False)
                contact.owner = request.user
                contact.save()
                form.save_m2m()
            except Exception as e:
                logger.exception("Creating contact failed for %s", request.user.email)
                messages.error(request, f'Error creating contact: {str(e)}')
            else:
                messages.success(request, f'Contact "{contact.name}" created successfully')
                return redirect('contacts:contact_detail', pk=contact.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        form = ContactForm()

    context = {
        'form': form,
        'form_title': 'Add Contact',
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_form.html', context)


@login_required
def contact_edit_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk, owner=request.user)

    if request.method == 'POST':
        form = ContactForm(request.POST, instance=contact)

        if form.is_valid():
            try:
                contact = form.save()
            except Exception as e:
                logger.exception("Updating contact %s failed", contact.pk)
                messages.error(request, f'Error updating contact: {str(e)}')
            else:
                messages.success(request, f'Contact "{contact.name}" updated successfully')
                return redirect('contacts:contact_detail', pk=contact.pk)
        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        form = ContactForm(instance=contact)

    context = {
        'form': form,
        'contact': contact,
        'form_title': f'Edit Contact: {contact.name}',
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_form.html', context)


@login_required
@require_POST
def contact_delete_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk, owner=request.user)
    contact_name = contact.name

    try:
        contact.delete()
    except Exception as e:
        logger.exception("Deleting contact %s failed", pk)
        if is_ajax(request):
            return JsonResponse({'success': False, 'error': str(e)}, status=500)
        messages.error(request, f'Error deleting contact: {str(e)}')
        return redirect('contacts:contact_detail', pk=pk)

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Contact "{contact_name}" deleted successfully')
    return redirect('contacts:contact_list')


# IMPORT / EXPORT
@login_required
def contact_export_view(request):
    return importing.export_view(request, ContactSheet())


@login_required
def contact_template_view(request):
    return importing.template_view(request, ContactSheet())


@login_required
def contact_import_view(request):
    return importing.upload_view(request, ContactSheet())


@login_required
def contact_import_map_view(request):
    return importing.mapping_view(request, ContactSheet())
