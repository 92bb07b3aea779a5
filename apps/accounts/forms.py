from django import forms
from django.contrib.auth.forms import UserCreationForm
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ValidationError
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Fieldset, Submit, Div, Field, HTML
from crispy_forms.bootstrap import FormActions

from .models import UserProfile

User = get_user_model()


# LOGIN FORM
class LoginForm(forms.Form):
    email = forms.EmailField(
        label=_('Email Address'),
        max_length=255,
        required=True,
        widget=forms.EmailInput(attrs={
            'class': 'form-control',
            'placeholder': _('you@company.com'),
            'autofocus': True,
        })
    )

    password = forms.CharField(
        label=_('Password'),
        required=True,
        widget=forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': _('Enter your password'),
        })
    )

    remember = forms.BooleanField(
        label=_('Remember me'),
        required=False,
        initial=False,
        widget=forms.CheckboxInput(attrs={
            'class': 'form-check-input',
        })
    )

    def __init__(self, *args, **kwargs):

        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = 'post'

        self.helper.layout = Layout(
            Field('email', css_class='mb-3'),
            Field('password', css_class='mb-3'),
            Field('remember', css_class='mb-3'),
            FormActions(
                Submit('submit', _('Login'), css_class='btn btn-primary w-100')
            )
        )

    def clean_email(self):

        email = self.cleaned_data.get('email', '')
        return email.lower().strip()


# SIGNUP FORM
class SignupForm(UserCreationForm):

    full_name = forms.CharField(
        label=_('Full Name'),
        max_length=101,
        required=True,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': _('Jane Doe'),
            'autofocus': True,
        }),
        error_messages={'required': _('Full name is required')},
    )

    company_name = forms.CharField(
        label=_('Company Name'),
        max_length=150,
        required=False,
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': _('Acme Inc'),
        })
    )

    email = forms.EmailField(
        label=_('Email Address'),
        required=True,
        widget=forms.EmailInput(attrs={
            'class': 'form-control',
            'placeholder': _('you@company.com'),
        })
    )

    class Meta:
        model = User
        fields = ['full_name', 'company_name', 'email', 'password1', 'password2']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.fields['password1'].widget = forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': _('At least 6 characters'),
        })
        self.fields['password2'].widget = forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': _('Confirm password'),
        })

        self.helper = FormHelper()
        self.helper.form_method = 'post'

        self.helper.layout = Layout(
            'full_name',
            'company_name',
            'email',
            Div(
                Div('password1', css_class='col-md-6'),
                Div('password2', css_class='col-md-6'),
                css_class='row'
            ),
            FormActions(
                Submit('submit', _('Create Account'), css_class='btn btn-primary w-100'),
            )
        )

    def clean_email(self):
        email = self.cleaned_data.get('email', '').lower().strip()

        if User.objects.filter(email=email).exists():
            raise ValidationError(
                _('A user with this email already exists.')
            )

        return email

    def save(self, commit=True):
        user = super().save(commit=False)
        user.email = self.cleaned_data['email']
        user.company_name = self.cleaned_data.get('company_name', '')
        user.set_full_name(self.cleaned_data['full_name'])
        if commit:
            user.save()
        return user


# PROFILE FORM (User fields)
class ProfileForm(forms.ModelForm):

    class Meta:
        model = User
        fields = [
            'first_name',
            'last_name',
            'phone',
            'company_name',
            'job_title',
            'avatar',
        ]

        widgets = {
            'first_name': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('First name'),
            }),
            'last_name': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('Last name'),
            }),
            'phone': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('+14155550100'),
            }),
            'company_name': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('Acme Inc'),
            }),
            'job_title': forms.TextInput(attrs={
                'class': 'form-control',
                'placeholder': _('e.g., Sales Manager'),
            }),
            'avatar': forms.FileInput(attrs={
                'class': 'form-control',
                'accept': 'image/*',
            }),
        }

        help_texts = {
            'avatar': _('Recommended: 300x300px, max 2MB (JPG, PNG)'),
            'company_name': _('Shown on invoices you send'),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # Rendered together with PreferencesForm inside one <form>
        self.helper = FormHelper()
        self.helper.form_tag = False

        self.helper.layout = Layout(
            Fieldset(
                _('Profile'),
                Div(
                    Div('first_name', css_class='col-md-6'),
                    Div('last_name', css_class='col-md-6'),
                    css_class='row'
                ),
                Div(
                    Div('phone', css_class='col-md-6'),
                    Div('company_name', css_class='col-md-6'),
                    css_class='row'
                ),
                Div(
                    Div('job_title', css_class='col-md-6'),
                    Div('avatar', css_class='col-md-6'),
                    css_class='row'
                ),
            ),
        )

    def clean_avatar(self):

        avatar = self.cleaned_data.get('avatar')

        # Only validate freshly uploaded files
        if avatar and hasattr(avatar, 'content_type'):
            max_size = 2 * 1024 * 1024
            if avatar.size > max_size:
                raise ValidationError(
                    _('Avatar file size must be less than 2MB.')
                )

            if not avatar.content_type.startswith('image/'):
                raise ValidationError(
                    _('Avatar must be an image file (JPG, PNG, GIF).')
                )

        return avatar


# PREFERENCES FORM (UserProfile fields)
class PreferencesForm(forms.ModelForm):

    class Meta:
        model = UserProfile
        fields = [
            'email_notifications',
            'deal_updates',
            'reminder_alerts',
            'invoice_notifications',
            'currency',
        ]

        widgets = {
            'email_notifications': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'deal_updates': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'reminder_alerts': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'invoice_notifications': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'currency': forms.Select(attrs={'class': 'form-select'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_tag = False

        self.helper.layout = Layout(
            Fieldset(
                _('Notifications'),
                'email_notifications',
                'deal_updates',
                'reminder_alerts',
                'invoice_notifications',
            ),
            Fieldset(
                _('Preferences'),
                'currency',
            ),
            FormActions(
                Submit('submit', _('Save Changes'), css_class='btn btn-primary'),
                HTML('<a href="{% url \'accounts:password_change\' %}" class="btn btn-outline-secondary">Change Password</a>'),
            )
        )
