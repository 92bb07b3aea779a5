from django import forms
from django.urls import reverse_lazy
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Div, Submit

from apps.contacts.models import Contact
from apps.deals.models import Deal
from .models import Activity


class ActivityForm(forms.ModelForm):
    """Log form shown on contact and deal pages; the target is a hidden field."""

    class Meta:
        model = Activity
        fields = ['type', 'title', 'description', 'contact', 'deal']
        widgets = {
            'type': forms.Select(attrs={'class': 'form-select'}),
            'title': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Called about the proposal'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3, 'placeholder': 'Details (optional)'}),
            'contact': forms.HiddenInput(),
            'deal': forms.HiddenInput(),
        }
        error_messages = {
            'title': {'required': 'Title is required'},
        }

    def __init__(self, *args, **kwargs):
        owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        # Only the owner's rows can be targeted
        self.fields['contact'].queryset = Contact.objects.filter(owner=owner) if owner else Contact.objects.none()
        self.fields['deal'].queryset = Deal.objects.filter(owner=owner) if owner else Deal.objects.none()

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.form_action = reverse_lazy('activities:activity_create')
        self.helper.layout = Layout(
            Div(
                Div('type', css_class='col-md-4'),
                Div('title', css_class='col-md-8'),
                css_class='row'
            ),
            'description',
            'contact',
            'deal',
            Submit('submit', 'Log Activity', css_class='btn btn-primary btn-sm'),
        )
