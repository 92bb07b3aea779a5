from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from crispy_forms.helper import FormHelper

from .spreadsheets import SUPPORTED_EXTENSIONS, missing_required


class ImportUploadForm(forms.Form):
    file = forms.FileField(label='Data File', help_text='Excel file (.xlsx, .xls) or CSV (.csv) - Max 5MB', widget=forms.FileInput(attrs={'class': 'form-control', 'accept': '.xlsx,.xls,.csv'}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_tag = False

    def clean_file(self):
        file = self.cleaned_data.get('file')
        if file:
            file_name = file.name.lower()
            if not any(file_name.endswith(ext) for ext in SUPPORTED_EXTENSIONS):
                raise ValidationError('Unsupported file type. Please upload Excel (.xlsx, .xls) or CSV (.csv) file')

            max_size = getattr(settings, 'CRM_IMPORT_MAX_FILE_SIZE', 5 * 1024 * 1024)
            if file.size > max_size:
                max_mb = max_size / (1024 * 1024)
                raise ValidationError(f'File size is too large. Maximum {max_mb:.0f}MB allowed')
        return file


class ColumnMappingForm(forms.Form):
    """One select per importable field, listing the headers found in the file."""

    def __init__(self, *args, headers=None, mappings=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.mappings = mappings or []

        choices = [('', '-- Skip this field --')] + [(h, h) for h in headers or []]
        for mapping in self.mappings:
            self.fields[mapping.field] = forms.ChoiceField(
                choices=choices,
                required=False,
                label=f'{mapping.label} *' if mapping.required else mapping.label,
                widget=forms.Select(attrs={'class': 'form-select'}),
            )

        self.helper = FormHelper()
        self.helper.form_tag = False

    def clean(self):
        cleaned_data = super().clean()
        missing = missing_required(cleaned_data, self.mappings)
        if missing:
            raise ValidationError(f'Please map required fields: {", ".join(missing)}')
        return cleaned_data

    def get_mapping(self):
        return {field: header for field, header in self.cleaned_data.items() if header}
