import logging

from django.shortcuts import render, redirect
from django.contrib.auth import authenticate, login, logout, update_session_auth_hash
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.contrib.auth.forms import PasswordChangeForm
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext_lazy as _
from django.views.decorators.cache import never_cache

from .forms import LoginForm, SignupForm, ProfileForm, PreferencesForm

logger = logging.getLogger(__name__)


def _safe_next_url(request):
    next_url = request.GET.get('next') or request.POST.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return None


# AUTHENTICATION VIEWS
@never_cache
def signup_view(request):
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = SignupForm(request.POST)

        if form.is_valid():
            try:
                user = form.save()
            except Exception as e:
                logger.exception("Signup failed for %s", form.cleaned_data.get('email'))
                messages.error(request, f'Error creating account: {e}')
            else:
                login(request, user, backend='django.contrib.auth.backends.ModelBackend')
                logger.info("New account: %s", user.email)
                messages.success(
                    request,
                    _('Welcome, {}! Your account is ready.').format(user.get_full_name())
                )
                return redirect('core:dashboard')
        else:
            messages.error(request, _('Please correct the errors below.'))

    else:
        form = SignupForm()

    context = {
        'form': form,
        'page_title': _('Create Account'),
    }

    return render(request, 'accounts/signup.html', context)


@never_cache
def login_view(request):
    # If already logged in, redirect to dashboard
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = LoginForm(request.POST)

        if form.is_valid():
            email = form.cleaned_data['email']
            password = form.cleaned_data['password']
            remember = form.cleaned_data.get('remember', False)

            # Returns User object if valid, None if invalid or inactive
            user = authenticate(request, username=email, password=password)

            if user is not None:
                login(request, user)

                if remember:
                    # Session expires in 30 days
                    request.session.set_expiry(30 * 24 * 60 * 60)
                else:
                    # Session expires when browser closes
                    request.session.set_expiry(0)

                messages.success(
                    request,
                    _('Welcome back, {}!').format(user.get_full_name())
                )

                next_url = _safe_next_url(request)
                if next_url:
                    return redirect(next_url)
                return redirect('core:dashboard')

            else:
                logger.warning("Failed login for %s", email)
                messages.error(
                    request,
                    _('Invalid email or password. Please try again.')
                )
        else:
            messages.error(request, _('Please correct the errors below.'))

    else:
        form = LoginForm()

    context = {
        'form': form,
        'page_title': _('Login'),
    }

    return render(request, 'accounts/login.html', context)


@login_required
def logout_view(request):
    user_name = request.user.get_full_name()

    # Clears session
    logout(request)

    messages.success(
        request,
        _('You have been logged out successfully. See you soon, {}!').format(user_name)
    )

    return redirect('accounts:login')


# SETTINGS VIEWS
@login_required
def settings_view(request):

    user = request.user
    profile = user.profile

    if request.method == 'POST':
        # Two forms: one for User, one for Profile
        profile_form = ProfileForm(
            request.POST,
            request.FILES,
            instance=user
        )
        preferences_form = PreferencesForm(
            request.POST,
            instance=profile
        )

        if profile_form.is_valid() and preferences_form.is_valid():
            try:
                profile_form.save()
                preferences_form.save()
            except Exception as e:
                logger.exception("Saving settings failed for %s", user.email)
                messages.error(request, f'Error saving settings: {e}')
            else:
                messages.success(
                    request,
                    _('Your settings have been saved.')
                )
                return redirect('accounts:settings')

        else:
            messages.error(
                request,
                _('Please correct the errors below.')
            )

    else:
        profile_form = ProfileForm(instance=user)
        preferences_form = PreferencesForm(instance=profile)

    context = {
        'profile_form': profile_form,
        'preferences_form': preferences_form,
        'profile': profile,
        'page_title': _('Settings'),
        'active_page': 'settings',
    }

    return render(request, 'accounts/settings.html', context)


# PASSWORD MANAGEMENT VIEWS
@login_required
def password_change_view(request):

    if request.method == 'POST':
        form = PasswordChangeForm(user=request.user, data=request.POST)

        if form.is_valid():
            user = form.save()

            # Keep user logged in
            update_session_auth_hash(request, user)
            messages.success(
                request,
                _('Your password has been changed successfully!')
            )
            return redirect('accounts:settings')

        else:
            messages.error(
                request,
                _('Please correct the errors below.')
            )

    else:
        form = PasswordChangeForm(user=request.user)

    context = {
        'form': form,
        'page_title': _('Change Password'),
    }

    return render(request, 'accounts/password_change.html', context)
