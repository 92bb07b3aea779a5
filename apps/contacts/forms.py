from django import forms
from django.core.exceptions import ValidationError
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Div, Submit, HTML
from crispy_forms.bootstrap import FormActions
from taggit.forms import TagWidget

from .models import Contact


class ContactForm(forms.ModelForm):
    class Meta:
        model = Contact
        fields = ['name', 'phone', 'email', 'whatsapp', 'company', 'tags', 'notes']

        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. John Doe', 'autofocus': True}),
            'phone': forms.TextInput(attrs={'class': 'form-control', 'placeholder': '+1234567890', 'dir': 'ltr'}),
            'email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'john@example.com', 'dir': 'ltr'}),
            'whatsapp': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Same as phone if empty', 'dir': 'ltr'}),
            'company': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Acme Inc'}),
            'tags': TagWidget(attrs={'class': 'form-control', 'placeholder': 'client, vip'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 4, 'placeholder': 'Add any notes here...'}),
        }

        help_texts = {
            'tags': 'Separate tags with commas',
            'whatsapp': 'Leave empty to use the phone number',
        }

        error_messages = {
            'name': {'required': 'Name is required', 'max_length': 'Name is too long (max 200 characters)'},
            'phone': {'required': 'Phone number is required'},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            Div(
                Div('name', css_class='col-md-6'),
                Div('company', css_class='col-md-6'),
                css_class='row'
            ),
            Div(
                Div('phone', css_class='col-md-4'),
                Div('whatsapp', css_class='col-md-4'),
                Div('email', css_class='col-md-4'),
                css_class='row'
            ),
            'tags',
            'notes',
            FormActions(
                Submit('submit', 'Save', css_class='btn btn-primary'),
                HTML('<a href="{% url \'contacts:contact_list\' %}" class="btn btn-outline-secondary">Cancel</a>'),
            )
        )

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if not name:
            raise ValidationError('Name is required')
        return name

    def clean_phone(self):
        phone = self.cleaned_data.get('phone', '').strip()
        if not phone:
            raise ValidationError('Phone number is required')
        return phone

    def clean_email(self):
        email = self.cleaned_data.get('email')
        if email:
            return email.strip().lower()
        return ''

    def clean_whatsapp(self):
        return (self.cleaned_data.get('whatsapp') or '').strip()


class ContactFilterForm(forms.Form):
    q = forms.CharField(required=False, label='Search', widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Search by name, email, phone, or company...'}))
    tag = forms.CharField(required=False, label='Tag', widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Tag'}))
