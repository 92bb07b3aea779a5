from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Div, Submit, HTML
from crispy_forms.bootstrap import FormActions

from apps.contacts.models import Contact
from apps.deals.models import Deal
from .models import Reminder


class ReminderForm(forms.ModelForm):

    due_date = forms.DateTimeField(
        label='Due Date',
        input_formats=['%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M', '%Y-%m-%d'],
        widget=forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local'}, format='%Y-%m-%dT%H:%M'),
        error_messages={'required': 'Due date is required'},
    )

    class Meta:
        model = Reminder
        fields = ['title', 'description', 'due_date', 'priority', 'contact', 'deal']

        widgets = {
            'title': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Follow up on proposal', 'autofocus': True}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
            'priority': forms.Select(attrs={'class': 'form-select'}),
            'contact': forms.Select(attrs={'class': 'form-select'}),
            'deal': forms.Select(attrs={'class': 'form-select'}),
        }

        error_messages = {
            'title': {'required': 'Title is required'},
        }

    def __init__(self, *args, **kwargs):
        owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        self.fields['contact'].queryset = Contact.objects.filter(owner=owner).order_by('name') if owner else Contact.objects.none()
        self.fields['deal'].queryset = Deal.objects.filter(owner=owner).order_by('-created_at') if owner else Deal.objects.none()
        self.fields['contact'].empty_label = 'No contact'
        self.fields['deal'].empty_label = 'No deal'

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            'title',
            Div(
                Div('due_date', css_class='col-md-6'),
                Div('priority', css_class='col-md-6'),
                css_class='row'
            ),
            Div(
                Div('contact', css_class='col-md-6'),
                Div('deal', css_class='col-md-6'),
                css_class='row'
            ),
            'description',
            FormActions(
                Submit('submit', 'Save', css_class='btn btn-primary'),
                HTML('<a href="{% url \'reminders:reminder_list\' %}" class="btn btn-outline-secondary">Cancel</a>'),
            )
        )

    def clean_title(self):
        return self.cleaned_data.get('title', '').strip()
