from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Div, Submit, HTML
from crispy_forms.bootstrap import FormActions

from apps.contacts.models import Contact
from .models import Ticket, TicketMessage


class TicketForm(forms.ModelForm):

    class Meta:
        model = Ticket
        fields = ['subject', 'contact', 'description', 'status', 'priority', 'category', 'assigned_to']

        widgets = {
            'subject': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Brief description of the issue', 'autofocus': True}),
            'contact': forms.Select(attrs={'class': 'form-select'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 4, 'placeholder': 'Detailed description...'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'priority': forms.Select(attrs={'class': 'form-select'}),
            'category': forms.Select(attrs={'class': 'form-select'}),
            'assigned_to': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Team member name'}),
        }

        error_messages = {
            'subject': {'required': 'Subject is required'},
        }

    def __init__(self, *args, **kwargs):
        owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        self.fields['contact'].queryset = Contact.objects.filter(owner=owner).order_by('name') if owner else Contact.objects.none()
        self.fields['contact'].empty_label = 'No customer'

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            'subject',
            'contact',
            'description',
            Div(
                Div('status', css_class='col-md-4'),
                Div('priority', css_class='col-md-4'),
                Div('category', css_class='col-md-4'),
                css_class='row'
            ),
            'assigned_to',
            FormActions(
                Submit('submit', 'Save', css_class='btn btn-primary'),
                HTML('<a href="{% url \'tickets:ticket_list\' %}" class="btn btn-outline-secondary">Cancel</a>'),
            )
        )

    def clean_subject(self):
        return self.cleaned_data.get('subject', '').strip()


class TicketMessageForm(forms.ModelForm):

    class Meta:
        model = TicketMessage
        fields = ['message', 'is_internal']

        widgets = {
            'message': forms.Textarea(attrs={'class': 'form-control', 'rows': 3, 'placeholder': 'Type your reply...'}),
            'is_internal': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
        }

        labels = {
            'is_internal': 'Internal note',
        }

        error_messages = {
            'message': {'required': 'Message cannot be empty'},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.layout = Layout(
            'message',
            'is_internal',
            Submit('submit', 'Send', css_class='btn btn-primary btn-sm'),
        )

    def clean_message(self):
        message = self.cleaned_data.get('message', '').strip()
        if not message:
            raise forms.ValidationError('Message cannot be empty')
        return message
