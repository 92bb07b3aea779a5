# Decorators in this file:
# 1. owner_required - Object in the URL must belong to request.user
# 2. ajax_required - Only AJAX requests allowed
# 3. post_required - Only POST requests allowed (JSON error otherwise)
#
# Tenancy: every CRM row has an ``owner`` foreign key. Views still filter
# their querysets by owner; these decorators add a guard at the URL level.
# ==============================================================================

from functools import wraps
from django.shortcuts import redirect
from django.contrib import messages
from django.http import Http404, HttpResponseForbidden, JsonResponse
from django.utils.translation import gettext_lazy as _


def is_ajax(request):
    """True when the request was sent by fetch()/XMLHttpRequest."""
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


# OWNERSHIP DECORATOR
def owner_required(model_class, pk_param='pk', owner_field='owner'):
    """
    Decorator: Verify accessed object belongs to the logged-in user

    Args:
        model_class: Model class to verify (e.g., Contact, Deal)
        pk_param: URL parameter name for primary key (default: 'pk')
        owner_field: Field holding the owning user (default: 'owner')

    Usage:
        @login_required
        @owner_required(Contact)
        def contact_detail_view(request, pk):
            ...

    Another user's object → 404 (not 403, to hide existence)
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                messages.error(request, _('Please login to continue.'))
                return redirect('accounts:login')

            pk = kwargs.get(pk_param)

            if not pk:
                # No pk provided, let view handle it
                return view_func(request, *args, **kwargs)

            lookup = {'pk': pk, owner_field: request.user}
            if not model_class.objects.filter(**lookup).exists():
                raise Http404(
                    f"{model_class.__name__} not found or you don't have access to it."
                )

            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


# REQUEST TYPE DECORATORS
def ajax_required(view_func):
    """
    Decorator: Only AJAX requests allowed

    Detects AJAX through the X-Requested-With header
    Direct browser access → 403 Forbidden
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if is_ajax(request):
            return view_func(request, *args, **kwargs)

        return HttpResponseForbidden('AJAX requests only')

    return wrapper


def post_required(view_func):
    """
    Decorator: Only POST requests allowed

    Like Django's @require_POST, but answers with a JSON error body
    so fetch() callers can show the message.
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if request.method == 'POST':
            return view_func(request, *args, **kwargs)

        return JsonResponse({
            'success': False,
            'error': 'POST requests only'
        }, status=405)

    return wrapper
