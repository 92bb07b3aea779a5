from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.paginator import Paginator
from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from apps.accounts.decorators import is_ajax
from .forms import ActivityForm
from .models import Activity


def _back_to(deal=None, contact=None):
    """Detail page of the deal / contact the activity belongs to."""
    if deal is not None:
        return redirect('deals:deal_detail', pk=deal.pk)
    if contact is not None:
        return redirect('contacts:contact_detail', pk=contact.pk)
    return redirect('activities:activity_list')


@login_required
def activity_list_view(request):
    activities = Activity.objects.filter(owner=request.user).select_related('contact', 'deal')

    activity_type = request.GET.get('type', '')
    if activity_type in dict(Activity.TYPE_CHOICES):
        activities = activities.filter(type=activity_type)

    paginator = Paginator(activities, settings.CRM_PAGINATION_SIZE)
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'activities': page_obj,
        'page_obj': page_obj,
        'type_choices': Activity.TYPE_CHOICES,
        'current_type': activity_type,
        'is_paginated': page_obj.has_other_pages(),
        'active_page': 'activities',
    }

    return render(request, 'activities/activity_list.html', context)


@login_required
@require_POST
def activity_create_view(request):
    form = ActivityForm(request.POST, owner=request.user)

    if form.is_valid():
        activity = form.save(commit=False)
        activity.owner = request.user
        if activity.deal and not activity.contact:
            activity.contact = activity.deal.contact
        activity.save()

        if is_ajax(request):
            return JsonResponse({
                'success': True,
                'activity': {
                    'id': activity.id,
                    'type': activity.type,
                    'type_display': activity.get_type_display(),
                    'title': activity.title,
                    'description': activity.description,
                    'created_at': activity.created_at.isoformat(),
                }
            })

        messages.success(request, 'Activity logged successfully')
        return _back_to(activity.deal, activity.contact)

    if is_ajax(request):
        return JsonResponse({'success': False, 'errors': form.errors})

    messages.error(request, 'Please enter an activity title')
    return _back_to(form.cleaned_data.get('deal'), form.cleaned_data.get('contact'))


@login_required
@require_POST
def activity_delete_view(request, pk):
    activity = get_object_or_404(Activity.objects.select_related('contact', 'deal'), pk=pk, owner=request.user)
    response = _back_to(activity.deal, activity.contact)
    activity.delete()

    if is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, 'Activity deleted successfully')
    return response
