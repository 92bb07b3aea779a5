"""
Spreadsheet Helpers Tests
=========================

Test Coverage:
1. Value transforms (to_number, to_amount, to_choice, to_date, to_datetime, to_tags, to_text)
2. Column mapping (auto_map, missing_required, apply_mapping, validate_record)
3. Reading .csv / .xlsx uploads
4. Export workbook, template and CSV responses

Run tests:
    docker compose exec web python manage.py test apps.core.tests.test_spreadsheets
"""

import datetime
from decimal import Decimal
from io import BytesIO
from zipfile import ZipFile

import openpyxl
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase
from django.utils import timezone

from apps.core.spreadsheets import (
    ColumnMapping,
    SpreadsheetError,
    apply_mapping,
    auto_map,
    build_template,
    build_workbook,
    csv_response,
    missing_required,
    read_spreadsheet,
    to_amount,
    to_choice,
    to_date,
    to_datetime,
    to_number,
    to_tags,
    to_text,
    validate_record,
)


MAPPINGS = [
    ColumnMapping('name', 'Name', required=True),
    ColumnMapping('phone', 'Phone', required=True),
    ColumnMapping('company', 'Company'),
    ColumnMapping('tags', 'Tags', transform=to_tags),
]


def xlsx_upload(rows, name='data.xlsx'):
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return SimpleUploadedFile(name, buffer.getvalue())


class TransformTest(SimpleTestCase):
    """Test cell value transforms"""

    def test_to_number_parses_money(self):
        self.assertEqual(to_number('1,500.50'), Decimal('1500.50'))
        self.assertEqual(to_number('$200'), Decimal('200'))
        self.assertEqual(to_number(42.5), Decimal('42.5'))

    def test_to_number_invalid_becomes_zero(self):
        """
        Test: Non-numeric cells

        Expected: 0, never an exception
        """
        self.assertEqual(to_number('abc'), Decimal('0'))
        self.assertEqual(to_number(None), Decimal('0'))
        self.assertEqual(to_number('nan'), Decimal('0'))
        self.assertEqual(to_number(''), Decimal('0'))

    def test_to_amount_rounds_to_cents(self):
        self.assertEqual(to_amount('$1,500.555'), Decimal('1500.56'))
        self.assertEqual(to_amount('9999999999.99'), Decimal('9999999999.99'))
        self.assertEqual(to_amount('abc'), Decimal('0.00'))

    def test_to_amount_rejects_huge_values(self):
        """
        Test: Scientific notation and values past 12 digits

        Expected: ValueError, never a decimal.InvalidOperation
        """
        for value in ['1e30', '10000000000', '-1E+15']:
            with self.assertRaisesMessage(ValueError, 'Value is too large'):
                to_amount(value)

    def test_to_text_keeps_phone_digits(self):
        """Excel floats like 14155550100.0 become '14155550100'"""
        self.assertEqual(to_text(14155550100.0), '14155550100')
        self.assertEqual(to_text('  Jane  '), 'Jane')
        self.assertEqual(to_text(None), '')

    def test_to_choice_matches_key_or_label(self):
        transform = to_choice([('in_progress', 'In Progress'), ('open', 'Open')], 'open')

        self.assertEqual(transform('IN PROGRESS'), 'in_progress')
        self.assertEqual(transform('in_progress'), 'in_progress')
        self.assertEqual(transform('unknown'), 'open')
        self.assertEqual(transform(None), 'open')

    def test_to_tags_splits_on_commas(self):
        self.assertEqual(to_tags('client, vip ,,lead'), ['client', 'vip', 'lead'])
        self.assertEqual(to_tags(''), [])

    def test_to_date_formats(self):
        expected = datetime.date(2024, 3, 15)

        self.assertEqual(to_date('2024-03-15'), expected)
        self.assertEqual(to_date('03/15/2024'), expected)
        self.assertEqual(to_date(datetime.datetime(2024, 3, 15, 10, 30)), expected)
        self.assertEqual(to_date(45366), expected)  # Excel serial
        self.assertIsNone(to_date('not a date'))

    def test_to_datetime_is_aware(self):
        value = to_datetime('2024-03-15 10:00')

        self.assertTrue(timezone.is_aware(value))
        self.assertEqual(timezone.localtime(value).hour, 10)

        midnight = to_datetime('2024-03-15')
        self.assertEqual(timezone.localtime(midnight).date(), datetime.date(2024, 3, 15))
        self.assertIsNone(to_datetime('garbage'))


class ColumnMappingTest(SimpleTestCase):
    """Test auto mapping and row validation"""

    def test_auto_map_exact_and_partial(self):
        headers = ['Full Name', 'Phone', 'Company Name', 'tags']

        mapping = auto_map(headers, MAPPINGS)

        self.assertEqual(mapping['phone'], 'Phone')
        self.assertEqual(mapping['company'], 'Company Name')
        self.assertEqual(mapping['tags'], 'tags')
        # "name" is contained in "Full Name" (first partial hit)
        self.assertEqual(mapping['name'], 'Full Name')

    def test_auto_map_prefers_exact_match(self):
        """
        Test: "Company Name" appears before "Name"

        Expected: Name maps to the exact "Name" column
        """
        mapping = auto_map(['Company Name', 'Name'], MAPPINGS)

        self.assertEqual(mapping['name'], 'Name')

    def test_missing_required(self):
        self.assertEqual(missing_required({'name': 'Name'}, MAPPINGS), ['Phone'])
        self.assertEqual(missing_required({'name': 'Name', 'phone': 'Tel'}, MAPPINGS), [])

    def test_apply_mapping_and_validate(self):
        rows = [
            (2, {'Name': 'Jane', 'Tel': '555', 'Tags': 'a, b'}),
            (3, {'Name': '  ', 'Tel': '556'}),
        ]
        mapping = {'name': 'Name', 'phone': 'Tel', 'tags': 'Tags', 'company': 'Missing'}

        mapped = apply_mapping(rows, mapping, MAPPINGS)

        self.assertEqual(mapped[0], (2, {'name': 'Jane', 'phone': '555', 'tags': ['a', 'b']}))
        self.assertEqual(mapped[1], (3, {'phone': '556'}))
        self.assertEqual(validate_record(mapped[0][1], MAPPINGS), [])
        self.assertEqual(validate_record(mapped[1][1], MAPPINGS), ['Name is required'])


class ReadSpreadsheetTest(SimpleTestCase):
    """Test parsing uploaded files"""

    def test_read_csv_with_bom_and_blank_lines(self):
        content = '﻿Name,Phone\r\nJane,555\r\n,\r\nJohn,556\r\n'.encode('utf-8')
        upload = SimpleUploadedFile('contacts.csv', content, content_type='text/csv')

        headers, rows = read_spreadsheet(upload)

        self.assertEqual(headers, ['Name', 'Phone'])
        self.assertEqual(rows, [(2, {'Name': 'Jane', 'Phone': '555'}), (4, {'Name': 'John', 'Phone': '556'})])

    def test_read_xlsx(self):
        upload = xlsx_upload([
            ['Title', 'Value', 'Close Date'],
            ['Website', 5000, datetime.datetime(2024, 3, 15)],
        ])

        headers, rows = read_spreadsheet(upload)

        self.assertEqual(headers, ['Title', 'Value', 'Close Date'])
        self.assertEqual(rows[0][0], 2)
        self.assertEqual(rows[0][1]['Title'], 'Website')
        self.assertEqual(rows[0][1]['Value'], 5000)
        self.assertTrue(rows[0][1]['Close Date'].startswith('2024-03-15'))

    def test_broken_xlsx_raises(self):
        upload = SimpleUploadedFile('broken.xlsx', b'this is not a workbook')

        with self.assertRaises(SpreadsheetError):
            read_spreadsheet(upload)

    def test_corrupt_xlsx_raises(self):
        """
        Test: A zip archive whose XML parts are broken

        Expected: SpreadsheetError, not the XML parser's own exception
        """
        buffer = BytesIO()
        with ZipFile(buffer, 'w') as archive:
            archive.writestr('[Content_Types].xml', '<Types><broken')
        upload = SimpleUploadedFile('bad.xlsx', buffer.getvalue())

        with self.assertRaises(SpreadsheetError):
            read_spreadsheet(upload)

    def test_unsupported_extension_raises(self):
        upload = SimpleUploadedFile('notes.txt', b'hello')

        with self.assertRaises(SpreadsheetError):
            read_spreadsheet(upload)


class ExportTest(SimpleTestCase):
    """Test workbook / CSV output"""

    class Row:
        def __init__(self, name, value):
            self.name = name
            self.value = value
            self.contact = None

    def test_build_workbook_styles_header(self):
        records = [self.Row('Jane', Decimal('10.50'))]
        columns = [('Name', 'name'), ('Value', 'value'), ('Contact', 'contact.name'), ('Upper', lambda r: r.name.upper())]

        wb = build_workbook(records, columns)
        ws = wb.active

        self.assertEqual(ws.title, 'Data')
        self.assertEqual([c.value for c in ws[1]], ['Name', 'Value', 'Contact', 'Upper'])
        self.assertTrue(ws['A1'].font.bold)
        self.assertEqual(ws['B2'].value, 10.5)
        self.assertIn(ws['C2'].value, ('', None))
        self.assertEqual(ws['D2'].value, 'JANE')

    def test_build_template_has_example_row(self):
        mappings = [ColumnMapping('title', 'Title', required=True), ColumnMapping('expected_close_date', 'Close Date', header='Expected Close Date')]

        ws = build_template(mappings, ['Website Redesign', '2024-03-15']).active

        self.assertEqual([c.value for c in ws[1]], ['Title', 'Expected Close Date'])
        self.assertEqual([c.value for c in ws[2]], ['Website Redesign', '2024-03-15'])

    def test_csv_response_starts_with_bom(self):
        response = csv_response([self.Row('Jane', Decimal('1'))], [('Name', 'name')], 'contacts.csv')
        content = response.content.decode('utf-8')

        self.assertTrue(content.startswith('﻿'))
        self.assertIn('Name', content)
        self.assertIn('Jane', content)
        self.assertIn('contacts.csv', response['Content-Disposition'])
