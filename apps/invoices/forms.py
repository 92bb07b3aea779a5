from decimal import Decimal

from django import forms
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Div
from crispy_forms.bootstrap import AppendedText

from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.core.spreadsheets import MAX_AMOUNT, to_number
from .models import Invoice


class InvoiceForm(forms.ModelForm):
    tax_rate = forms.CharField(required=False, label='Tax Rate', widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': '0', 'inputmode': 'decimal'}))

    class Meta:
        model = Invoice
        fields = ['invoice_number', 'contact', 'deal', 'status', 'due_date', 'tax_rate', 'notes']

        widgets = {
            'invoice_number': forms.TextInput(attrs={'class': 'form-control'}),
            'contact': forms.Select(attrs={'class': 'form-select'}),
            'deal': forms.Select(attrs={'class': 'form-select'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
            'due_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 3, 'placeholder': 'Payment terms, bank details...'}),
        }

        error_messages = {
            'invoice_number': {'required': 'Invoice number is required'},
            'due_date': {'required': 'Due date is required'},
        }

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner', None)
        super().__init__(*args, **kwargs)

        if self.owner:
            self.fields['contact'].queryset = Contact.objects.filter(owner=self.owner).order_by('name')
            self.fields['deal'].queryset = Deal.objects.filter(owner=self.owner).order_by('-created_at')
        else:
            self.fields['contact'].queryset = Contact.objects.none()
            self.fields['deal'].queryset = Deal.objects.none()

        self.fields['contact'].empty_label = 'No customer'
        self.fields['deal'].empty_label = 'No deal'

        # Rendered together with the items formset inside one <form>
        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.layout = Layout(
            Div(
                Div('invoice_number', css_class='col-md-4'),
                Div('status', css_class='col-md-4'),
                Div('due_date', css_class='col-md-4'),
                css_class='row'
            ),
            Div(
                Div('contact', css_class='col-md-6'),
                Div('deal', css_class='col-md-6'),
                css_class='row'
            ),
            Div(
                Div(AppendedText('tax_rate', '%'), css_class='col-md-4'),
                css_class='row'
            ),
            'notes',
        )

    def clean_invoice_number(self):
        number = self.cleaned_data.get('invoice_number', '').strip()

        duplicates = Invoice.objects.filter(owner=self.owner, invoice_number=number)
        if self.instance.pk:
            duplicates = duplicates.exclude(pk=self.instance.pk)

        if duplicates.exists():
            raise forms.ValidationError('Invoice number already exists')

        return number

    def clean_tax_rate(self):
        rate = to_number(self.cleaned_data.get('tax_rate'))
        if rate < 0 or rate > 100:
            raise forms.ValidationError('Tax rate must be between 0 and 100')
        return rate.quantize(Decimal('0.01'))


def _bounded_number(value):
    number = to_number(value)
    if abs(number) > MAX_AMOUNT:
        raise forms.ValidationError('Value is too large')
    return number


class InvoiceItemForm(forms.Form):
    description = forms.CharField(required=False, max_length=255, widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Item description'}))
    quantity = forms.CharField(required=False, widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': '1', 'inputmode': 'decimal'}))
    price = forms.CharField(required=False, widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': '0.00', 'inputmode': 'decimal'}))

    def clean_description(self):
        return self.cleaned_data.get('description', '').strip()

    def clean_quantity(self):
        return _bounded_number(self.cleaned_data.get('quantity'))

    def clean_price(self):
        return _bounded_number(self.cleaned_data.get('price'))


InvoiceItemFormSet = forms.formset_factory(InvoiceItemForm, extra=1, can_delete=True)


def _plain_number(value):
    """Decimal → int or float so the line item fits in a JSONField."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def items_from_formset(formset):
    """
    Line items worth keeping: a description and a quantity above zero

    Rows marked for deletion are dropped as well.
    """
    items = []
    for form in formset.forms:
        data = getattr(form, 'cleaned_data', None)
        if not data or data.get('DELETE'):
            continue
        if not data.get('description') or data.get('quantity', 0) <= 0:
            continue
        items.append({
            'description': data['description'],
            'quantity': _plain_number(data['quantity']),
            'price': _plain_number(data['price']),
        })
    return items


def formset_initial(invoice):
    return [
        {
            'description': item.get('description', ''),
            'quantity': item.get('quantity', ''),
            'price': item.get('price', ''),
        }
        for item in invoice.items or []
    ]


class InvoiceFilterForm(forms.Form):
    q = forms.CharField(required=False, label='Search', widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Search by number or customer...'}))
    status = forms.ChoiceField(choices=[('', 'All Statuses')] + Invoice.STATUS_CHOICES, required=False, label='Status', widget=forms.Select(attrs={'class': 'form-select'}))
