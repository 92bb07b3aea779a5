"""
Spreadsheet import / export flow
================================

Shared by contacts, deals, invoices and reminders. Each app describes its
columns once in a ``SheetConfig`` subclass; the functions here do the rest:

    upload_view()    → validate the file, parse it, keep rows in the session
    mapping_view()   → pick a file column per field, preview, run the import
    export_view()    → download the owner's rows as .xlsx or .csv
    template_view()  → download an empty template with one example row

Invalid rows are skipped and reported as "Row N: ..."; every valid row is
saved for ``request.user``.
"""

import logging

from django.conf import settings
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.shortcuts import render, redirect

from .forms import ImportUploadForm, ColumnMappingForm
from .spreadsheets import (
    SpreadsheetError,
    apply_mapping,
    auto_map,
    build_template,
    build_workbook,
    csv_response,
    export_value,
    read_spreadsheet,
    validate_record,
    workbook_response,
)

logger = logging.getLogger(__name__)


class SheetConfig:
    """
    Describes how one model moves in and out of spreadsheets

    Subclasses set:
        entity: file / session name ('contacts')
        verbose_name: plural label used in messages ('contacts')
        mappings: list of ColumnMapping (import + template columns)
        export_columns: [(label, getter), ...]
        template_example: one example value per mapping
        list_url / upload_url / mapping_url / template_url: URL names

    and implement build_object(). after_save() runs once the row is saved
    (e.g. to attach tags).
    """

    entity = None
    verbose_name = None
    mappings = []
    export_columns = []
    template_example = []

    list_url = None
    upload_url = None
    mapping_url = None
    template_url = None

    def get_queryset(self, request):
        raise NotImplementedError

    def build_object(self, owner, record):
        raise NotImplementedError

    def after_save(self, obj, record):
        pass

    @property
    def session_key(self):
        return f'import_{self.entity}'

    def save_record(self, owner, record):
        obj = self.build_object(owner, record)
        obj.full_clean()
        obj.save()
        self.after_save(obj, record)
        return obj


def run_import(config, owner, rows, mapping):
    """
    Save every valid mapped row for ``owner``

    Returns:
        dict: {'success': n, 'failed': n, 'skipped': n, 'errors': ['Row 3: ...']}
    """
    results = {
        'success': 0,
        'failed': 0,
        'skipped': 0,
        'errors': []
    }

    for row_number, record in apply_mapping(rows, mapping, config.mappings):
        errors = validate_record(record, config.mappings)
        if errors:
            results['errors'].append(f"Row {row_number}: {', '.join(errors)}")
            results['skipped'] += 1
            continue

        try:
            # One savepoint per row so a failed insert does not abort the rest
            with transaction.atomic():
                config.save_record(owner, record)
        except ValidationError as e:
            results['errors'].append(f"Row {row_number}: {'; '.join(e.messages)}")
            results['failed'] += 1
        except (DatabaseError, ValueError, TypeError, ArithmeticError) as e:
            logger.error("Import of %s row %s failed: %s", config.entity, row_number, e)
            results['errors'].append(f"Row {row_number}: {str(e)}")
            results['failed'] += 1
        else:
            results['success'] += 1

    logger.info(
        "Imported %s for %s: %d ok, %d skipped, %d failed",
        config.entity, owner.email, results['success'], results['skipped'], results['failed']
    )
    return results


def preview_rows(config, rows, mapping):
    limit = getattr(settings, 'CRM_IMPORT_PREVIEW_ROWS', 5)
    preview = []
    for row_number, record in apply_mapping(rows[:limit], mapping, config.mappings):
        preview.append({
            'row': row_number,
            'values': [export_value(record.get(m.field)) for m in config.mappings],
            'errors': validate_record(record, config.mappings),
        })
    return preview


def upload_view(request, config):
    if request.method == 'POST':
        form = ImportUploadForm(request.POST, request.FILES)

        if form.is_valid():
            uploaded_file = form.cleaned_data['file']
            try:
                headers, rows = read_spreadsheet(uploaded_file)
            except SpreadsheetError as e:
                form.add_error('file', str(e))
            else:
                max_rows = getattr(settings, 'CRM_IMPORT_MAX_ROWS', 5000)
                if not rows:
                    form.add_error('file', 'The file appears to be empty.')
                elif len(rows) > max_rows:
                    form.add_error('file', f'Too many rows. Maximum {max_rows} rows per import')
                else:
                    request.session[config.session_key] = {
                        'file_name': uploaded_file.name,
                        'headers': headers,
                        'rows': rows,
                    }
                    return redirect(config.mapping_url)

        messages.error(request, 'Please correct the errors in the form')

    else:
        form = ImportUploadForm()

    context = {
        'form': form,
        'config': config,
        'mappings': config.mappings,
        'page_title': f'Import {config.verbose_name.title()}',
        'active_page': config.entity,
    }

    return render(request, 'core/import_upload.html', context)


def mapping_view(request, config):
    data = request.session.get(config.session_key)
    if not data:
        messages.error(request, 'Please upload a file first')
        return redirect(config.upload_url)

    headers = data['headers']
    rows = data['rows']
    preview = []

    if request.method == 'POST':
        form = ColumnMappingForm(request.POST, headers=headers, mappings=config.mappings)

        if form.is_valid():
            mapping = form.get_mapping()

            if request.POST.get('action') == 'import':
                results = run_import(config, request.user, rows, mapping)
                del request.session[config.session_key]

                # Shown once on the list page
                request.session['import_results'] = results

                if results['success']:
                    messages.success(
                        request,
                        f'Import completed: {results["success"]} {config.verbose_name} imported, '
                        f'skipped: {results["skipped"]}, '
                        f'failed: {results["failed"]}'
                    )
                else:
                    messages.error(request, f'No {config.verbose_name} were imported')

                return redirect(config.list_url)

            preview = preview_rows(config, rows, mapping)
    else:
        form = ColumnMappingForm(initial=auto_map(headers, config.mappings), headers=headers, mappings=config.mappings)
        preview = preview_rows(config, rows, auto_map(headers, config.mappings))

    context = {
        'form': form,
        'config': config,
        'file_name': data['file_name'],
        'total_rows': len(rows),
        'preview': preview,
        'preview_labels': [m.label for m in config.mappings],
        'page_title': f'Import {config.verbose_name.title()}',
        'active_page': config.entity,
    }

    return render(request, 'core/import_mapping.html', context)


def export_view(request, config):
    export_format = request.GET.get('format', 'excel')
    records = config.get_queryset(request)

    if export_format == 'excel':
        wb = build_workbook(records, config.export_columns, title='Data')
        return workbook_response(wb, f'{config.entity}.xlsx')

    elif export_format == 'csv':
        return csv_response(records, config.export_columns, f'{config.entity}.csv')

    messages.error(request, 'Invalid export format')
    return redirect(config.list_url)


def template_view(request, config):
    wb = build_template(config.mappings, config.template_example, title='Template')
    return workbook_response(wb, f'{config.entity}_template.xlsx')
