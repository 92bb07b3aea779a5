from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Div, Submit, HTML
from crispy_forms.bootstrap import FormActions, PrependedText

from apps.contacts.models import Contact
from apps.core.spreadsheets import to_amount
from .models import Deal


class DealForm(forms.ModelForm):
    # Free text so "", "abc" or "1,500" never block the form; see clean_value
    value = forms.CharField(required=False, label='Value', widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': '0.00', 'inputmode': 'decimal'}))

    class Meta:
        model = Deal
        fields = ['title', 'contact', 'value', 'status', 'expected_close_date', 'description']

        widgets = {
            'title': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Website Redesign', 'autofocus': True}),
            'contact': forms.Select(attrs={'class': 'form-select'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'expected_close_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 4, 'placeholder': 'Deal details...'}),
        }

        error_messages = {
            'title': {'required': 'Title is required'},
        }

    def __init__(self, *args, **kwargs):
        owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        self.fields['contact'].queryset = Contact.objects.filter(owner=owner).order_by('name') if owner else Contact.objects.none()
        self.fields['contact'].empty_label = 'No contact'

        if not self.instance.pk:
            self.fields['status'].initial = 'new'

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            'title',
            Div(
                Div('contact', css_class='col-md-6'),
                Div(PrependedText('value', '$'), css_class='col-md-6'),
                css_class='row'
            ),
            Div(
                Div('status', css_class='col-md-6'),
                Div('expected_close_date', css_class='col-md-6'),
                css_class='row'
            ),
            'description',
            FormActions(
                Submit('submit', 'Save', css_class='btn btn-primary'),
                HTML('<a href="{% url \'deals:deal_list\' %}" class="btn btn-outline-secondary">Cancel</a>'),
            )
        )

    def clean_title(self):
        return self.cleaned_data.get('title', '').strip()

    def clean_value(self):
        try:
            return to_amount(self.cleaned_data.get('value'))
        except ValueError as e:
            raise forms.ValidationError(str(e))


class DealFilterForm(forms.Form):
    q = forms.CharField(required=False, label='Search', widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Search by title, description, or contact...'}))
    status = forms.ChoiceField(choices=[('', 'All Statuses')] + Deal.STATUS_CHOICES, required=False, label='Status', widget=forms.Select(attrs={'class': 'form-select'}))
