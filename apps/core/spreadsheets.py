"""
Spreadsheet import / export helpers
===================================

Shared by every app that moves data in or out of Excel / CSV files:

- read_spreadsheet()  → headers + data rows from .xlsx / .csv uploads
- auto_map()          → guess which file column feeds which model field
- missing_required()  → required fields the user left unmapped
- apply_mapping()     → rows keyed by model field, values transformed
- build_workbook()    → styled export workbook
- build_template()    → header row + example row for users to fill in

The first row of a file is always the header row.
"""

import csv
import datetime
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from io import TextIOWrapper

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils.datetime import from_excel
from django.http import HttpResponse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

logger = logging.getLogger(__name__)


XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
SUPPORTED_EXTENSIONS = ['.xlsx', '.xls', '.csv']

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="667eea", end_color="667eea", fill_type="solid")

# Accepted when a date cell arrives as text
DATE_INPUT_FORMATS = ['%Y-%m-%d', '%m/%d/%Y', '%d.%m.%Y', '%Y/%m/%d', '%d %b %Y', '%b %d, %Y']

CENT = Decimal('0.01')

# Largest value a 12 digit, 2 decimal money column holds
MAX_AMOUNT = Decimal('9999999999.99')


class SpreadsheetError(Exception):
    """The uploaded file could not be read as a spreadsheet."""


# ==============================================================================
# VALUE TRANSFORMS
# ==============================================================================

def to_text(value):
    if value is None:
        return ''
    # Excel stores phone numbers typed without "+" as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, datetime.datetime):
        return value.strftime('%Y-%m-%d %H:%M')
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value).strip()


def to_number(value):
    """Decimal value of a cell; anything non-numeric becomes 0."""
    if value is None or isinstance(value, bool):
        return Decimal('0')
    text = str(value).strip().replace(',', '')
    for symbol in ('$', '€', '£'):
        text = text.replace(symbol, '')
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return Decimal('0')
    if not number.is_finite():
        return Decimal('0')
    return number


def to_amount(value):
    """
    to_number() rounded half up to cents: '10.005' → Decimal('10.01')

    Raises:
        ValueError: the value does not fit a money column
    """
    number = to_number(value)
    if abs(number) > MAX_AMOUNT:
        raise ValueError('Value is too large')
    return number.quantize(CENT, rounding=ROUND_HALF_UP)


def to_tags(value):
    """'client, vip' → ['client', 'vip']"""
    if not value:
        return []
    return [tag.strip() for tag in str(value).split(',') if tag.strip()]


def to_choice(choices, default):
    """
    Build a transform that normalizes a cell to one of ``choices``

    Matches the stored value or its label, case-insensitively;
    anything else falls back to ``default``.

    Example:
        to_choice(Deal.STATUS_CHOICES, 'new')('Won') → 'won'
    """
    lookup = {}
    for key, label in choices:
        lookup[str(key).lower()] = key
        lookup[str(label).lower()] = key

    def transform(value):
        text = to_text(value).lower()
        return lookup.get(text, default)

    return transform


def to_date(value):
    """datetime.date from a date cell, an ISO / common text date or an Excel serial; None if invalid."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return from_excel(value).date()
        except (ValueError, TypeError, OverflowError):
            return None

    text = str(value).strip()
    try:
        parsed = parse_date(text)
    except ValueError:
        parsed = None
    if parsed:
        return parsed
    try:
        parsed_dt = parse_datetime(text)
    except ValueError:
        parsed_dt = None
    if parsed_dt:
        return parsed_dt.date()
    for fmt in DATE_INPUT_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def to_datetime(value):
    """Timezone-aware datetime; plain dates land at midnight in the current timezone."""
    if value is None or value == '':
        return None

    result = None
    if isinstance(value, datetime.datetime):
        result = value
    elif isinstance(value, float) and not value.is_integer():
        try:
            result = from_excel(value)
        except (ValueError, TypeError, OverflowError):
            return None
    elif isinstance(value, str):
        try:
            result = parse_datetime(value.strip())
        except ValueError:
            result = None

    if result is None:
        day = to_date(value)
        if day is None:
            return None
        result = datetime.datetime.combine(day, datetime.time.min)

    if timezone.is_naive(result):
        result = timezone.make_aware(result, timezone.get_current_timezone())
    return result


# ==============================================================================
# COLUMN MAPPING
# ==============================================================================

class ColumnMapping:
    """
    How one model field is filled from a spreadsheet column

    Args:
        field: model field name (e.g. 'name')
        label: human label shown in the mapping form (e.g. 'Name')
        header: column header used in templates (defaults to label)
        required: the row is skipped when this value is empty
        transform: callable applied to the raw cell value (default: to_text)
    """

    def __init__(self, field, label, header=None, required=False, transform=None):
        self.field = field
        self.label = label
        self.header = header or label
        self.required = required
        self.transform = transform or to_text

    def __repr__(self):
        return f'<ColumnMapping {self.field} ← "{self.header}">'

    def exact_match(self, header):
        header = header.strip().lower()
        return header == self.header.lower() or header == self.label.lower()

    def partial_match(self, header):
        return self.field.lower() in header.strip().lower()


def auto_map(headers, mappings):
    """
    Guess the file column for every mapping

    A header matches when it equals the template header or label
    (case-insensitive) or contains the field name. Exact matches win
    over partial ones so "Company Name" does not steal "Name".

    Returns:
        dict: {field: header}
    """
    result = {}
    for mapping in mappings:
        match = next((h for h in headers if mapping.exact_match(h)), None)
        if match is None:
            match = next((h for h in headers if mapping.partial_match(h)), None)
        if match is not None:
            result[mapping.field] = match
    return result


def missing_required(mapping, mappings):
    """Labels of required fields with no column chosen."""
    return [m.label for m in mappings if m.required and not mapping.get(m.field)]


def apply_mapping(rows, mapping, mappings):
    """
    Re-key spreadsheet rows by model field

    Args:
        rows: [(row_number, {header: value}), ...] from read_spreadsheet()
        mapping: {field: header} chosen by the user
        mappings: list of ColumnMapping

    Cells that are absent or blank are left out of the record, so model
    defaults apply. Transforms run on every present cell.

    Returns:
        list: [(row_number, {field: value}), ...]
    """
    mapped = []
    for row_number, values in rows:
        record = {}
        for column in mappings:
            header = mapping.get(column.field)
            if not header or header not in values:
                continue
            value = values[header]
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            record[column.field] = column.transform(value)
        mapped.append((row_number, record))
    return mapped


def validate_record(record, mappings):
    """Error messages for required fields missing (or invalid) in a mapped row."""
    errors = []
    for column in mappings:
        if not column.required:
            continue
        value = record.get(column.field)
        if value is None or value == '' or value == []:
            errors.append(f'{column.label} is required')
    return errors


# ==============================================================================
# READING FILES
# ==============================================================================

def _json_safe(value):
    """Cell value that survives the JSON session serializer."""
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _rows_from_matrix(matrix):
    headers = None
    rows = []
    for row_number, raw in enumerate(matrix, start=1):
        values = list(raw)
        if headers is None:
            if not any(v not in (None, '') for v in values):
                continue
            headers = [to_text(v) for v in values]
            continue
        if not any(v not in (None, '') and str(v).strip() for v in values):
            # Skip blank lines
            continue
        row = {}
        for index, header in enumerate(headers):
            if not header or index >= len(values):
                continue
            row.setdefault(header, _json_safe(values[index]))
        rows.append((row_number, row))

    return [h for h in (headers or []) if h], rows


def read_spreadsheet(uploaded_file):
    """
    Parse an uploaded .xlsx / .csv file

    Args:
        uploaded_file: Django UploadedFile

    Returns:
        tuple: (headers, rows) where rows is [(row_number, {header: value}), ...]

    Raises:
        SpreadsheetError: unreadable or unsupported file
    """
    file_name = uploaded_file.name.lower()

    if file_name.endswith('.csv'):
        try:
            uploaded_file.seek(0)
            file_data = TextIOWrapper(uploaded_file.file, encoding='utf-8-sig', newline='')
            matrix = list(csv.reader(file_data))
            file_data.detach()
        except (UnicodeDecodeError, csv.Error) as e:
            logger.warning("CSV parse failed for %s: %s", uploaded_file.name, e)
            raise SpreadsheetError(
                "Failed to read the file. Please ensure it's a valid Excel or CSV file."
            ) from e
        return _rows_from_matrix(matrix)

    if file_name.endswith('.xlsx') or file_name.endswith('.xls'):
        try:
            uploaded_file.seek(0)
            wb = openpyxl.load_workbook(uploaded_file, read_only=True, data_only=True)
            ws = wb.active
            matrix = list(ws.iter_rows(values_only=True))
            wb.close()
        except Exception as e:
            # Corrupt archives surface as zip, XML, zlib or attribute errors
            logger.warning("Workbook parse failed for %s: %s", uploaded_file.name, e)
            raise SpreadsheetError(
                "Failed to read the file. Please ensure it's a valid Excel or CSV file."
            ) from e
        return _rows_from_matrix(matrix)

    raise SpreadsheetError('Unsupported file type. Please upload Excel (.xlsx, .xls) or CSV (.csv) file')


# ==============================================================================
# WRITING FILES
# ==============================================================================

def _resolve(obj, getter):
    if callable(getter):
        return getter(obj)
    value = obj
    for part in getter.split('.'):
        value = getattr(value, part, None) if value is not None else None
    return value


def export_value(value):
    """Plain cell value for openpyxl / csv (no timezones, no Decimals)."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, datetime.datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.strftime('%Y-%m-%d %H:%M')
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (list, tuple)):
        return ', '.join(str(v) for v in value)
    return value


def _style_header(ws, labels):
    for col, label in enumerate(labels, start=1):
        cell = ws.cell(row=1, column=col, value=label)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL


def _autosize(ws):
    for col in ws.columns:
        column = col[0].column_letter
        max_length = max((len(str(cell.value)) for cell in col if cell.value is not None), default=0)
        ws.column_dimensions[column].width = min(max_length + 2, 50)


def build_workbook(records, columns, title='Data'):
    """
    Args:
        records: iterable of model instances
        columns: [(label, getter), ...]; getter is an attribute path
                 ('contact.name') or a callable taking the record

    Returns:
        openpyxl.Workbook
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title

    _style_header(ws, [label for label, _getter in columns])

    for row, record in enumerate(records, start=2):
        for col, (_label, getter) in enumerate(columns, start=1):
            ws.cell(row=row, column=col, value=export_value(_resolve(record, getter)))

    _autosize(ws)
    return wb


def build_template(mappings, example_row, title='Template'):
    """Workbook with the import headers and one example row."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title

    _style_header(ws, [m.header for m in mappings])
    for col, value in enumerate(example_row, start=1):
        ws.cell(row=2, column=col, value=value)

    _autosize(ws)
    return wb


def workbook_response(wb, filename):
    response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    wb.save(response)
    return response


def csv_response(records, columns, filename):
    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    # BOM so Excel opens the file as UTF-8
    response.write('﻿')

    writer = csv.writer(response)
    writer.writerow([label for label, _getter in columns])
    for record in records:
        writer.writerow([export_value(_resolve(record, getter)) for _label, getter in columns])

    return response
