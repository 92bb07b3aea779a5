"""
Invoice Model Tests
===================

Test Coverage:
1. Totals: line items, tax, rounding, garbage input
2. Invoice numbering per owner
3. paid_date follows the status
4. WhatsApp share link
5. Overdue check

Run tests:
    docker compose exec web python manage.py test apps.invoices.tests.test_models
"""

import datetime
from decimal import Decimal
from urllib.parse import unquote

from django.core import mail
from django.test import TestCase, SimpleTestCase, override_settings
from django.utils import timezone
from django.contrib.auth import get_user_model

from apps.contacts.models import Contact
from apps.invoices.models import Invoice, calculate_totals, money, next_invoice_number

User = get_user_model()


class CalculateTotalsTest(SimpleTestCase):
    """Test totals math"""

    def test_items_and_tax(self):
        items = [
            {'description': 'Design', 'quantity': 2, 'price': 500},
            {'description': 'Hosting', 'quantity': 1, 'price': '120.50'},
        ]

        self.assertEqual(
            calculate_totals(items, 14),
            (Decimal('1120.50'), Decimal('156.87'), Decimal('1277.37'))
        )

    def test_rounding_half_up(self):
        self.assertEqual(money('10.005'), Decimal('10.01'))
        self.assertEqual(money('10.004'), Decimal('10.00'))

    def test_garbage_counts_as_zero(self):
        """
        Test: Non-numeric quantity / price / tax rate

        Expected: Treated as 0, no exception
        """
        items = [
            {'description': 'Broken', 'quantity': 'abc', 'price': 100},
            {'description': 'Ok', 'quantity': 1, 'price': 50},
        ]

        self.assertEqual(calculate_totals(items, 'n/a'), (Decimal('50.00'), Decimal('0.00'), Decimal('50.00')))

    def test_no_items(self):
        self.assertEqual(calculate_totals([], 10), (Decimal('0.00'), Decimal('0.00'), Decimal('0.00')))

    def test_totals_past_column_size(self):
        items = [{'description': 'Bulk', 'quantity': '9999999999', 'price': '9999999999'}]

        with self.assertRaisesMessage(ValueError, 'Value is too large'):
            calculate_totals(items, 0)

    def test_total_including_tax_past_column_size(self):
        items = [{'description': 'Big', 'quantity': 1, 'price': '9000000000'}]

        with self.assertRaises(ValueError):
            calculate_totals(items, 50)


class InvoiceModelTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123', first_name='Owner')
        self.other = User.objects.create_user(email='other@example.com', password='testpass123')
        self.contact = Contact.objects.create(owner=self.user, name='Jane Doe', phone='+1 (415) 555-0100')

    def make_invoice(self, owner=None, number='INV-001', **kwargs):
        kwargs.setdefault('due_date', timezone.localdate() + datetime.timedelta(days=30))
        return Invoice.objects.create(owner=owner or self.user, invoice_number=number, **kwargs)

    def test_next_number_per_owner(self):
        self.assertEqual(next_invoice_number(self.user), 'INV-001')

        self.make_invoice(number='INV-001')
        self.make_invoice(owner=self.other, number='INV-001')

        self.assertEqual(next_invoice_number(self.user), 'INV-002')
        self.assertEqual(next_invoice_number(self.other), 'INV-002')

    def test_next_number_skips_taken(self):
        self.make_invoice(number='INV-002')

        self.assertEqual(next_invoice_number(self.user), 'INV-003')

    @override_settings(CRM_INVOICE_NUMBER_PREFIX='BILL')
    def test_next_number_prefix(self):
        self.assertEqual(next_invoice_number(self.user), 'BILL-001')

    def test_recalculate_from_items(self):
        invoice = self.make_invoice(items=[{'description': 'Work', 'quantity': 3, 'price': 100}], tax_rate=Decimal('10'))

        invoice.recalculate()

        self.assertEqual((invoice.amount, invoice.tax, invoice.total), (Decimal('300.00'), Decimal('30.00'), Decimal('330.00')))

    def test_recalculate_keeps_totals_without_items(self):
        invoice = self.make_invoice(amount=Decimal('1000'), tax=Decimal('100'), total=Decimal('1100'))

        invoice.recalculate()

        self.assertEqual(invoice.total, Decimal('1100'))

    def test_line_items(self):
        invoice = self.make_invoice(items=[{'description': 'Work', 'quantity': 1.5, 'price': 10}])

        self.assertEqual(invoice.get_line_items(), [{
            'description': 'Work',
            'quantity': Decimal('1.5'),
            'price': Decimal('10.00'),
            'line_total': Decimal('15.00'),
        }])

    def test_paid_date_follows_status(self):
        """
        Test: draft → paid → sent

        Expected: paid_date stamped on paid, kept on re-save, cleared after
        """
        invoice = self.make_invoice()
        self.assertIsNone(invoice.paid_date)

        invoice.set_status('paid')
        paid_date = invoice.paid_date
        self.assertIsNotNone(paid_date)

        invoice.notes = 'Thanks'
        invoice.save()
        self.assertEqual(invoice.paid_date, paid_date)

        invoice.set_status('sent')
        self.assertIsNone(invoice.paid_date)

    def test_paid_sends_email_once(self):
        invoice = self.make_invoice()

        invoice.set_status('paid')
        invoice.set_status('paid')

        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('INV-001', mail.outbox[0].subject)

    def test_invalid_status(self):
        invoice = self.make_invoice()

        with self.assertRaises(ValueError):
            invoice.set_status('refunded')

    def test_is_overdue(self):
        yesterday = timezone.localdate() - datetime.timedelta(days=1)

        self.assertTrue(self.make_invoice(number='A', status='sent', due_date=yesterday).is_overdue())
        self.assertFalse(self.make_invoice(number='B', status='draft', due_date=yesterday).is_overdue())
        self.assertFalse(self.make_invoice(number='C', status='sent').is_overdue())

    def test_whatsapp_share_url(self):
        invoice = self.make_invoice(contact=self.contact, total=Decimal('250.00'), due_date=datetime.date(2024, 3, 15))

        url = invoice.whatsapp_share_url()

        self.assertTrue(url.startswith('https://wa.me/14155550100?text='))
        message = unquote(url.split('?text=', 1)[1])
        self.assertIn('Hi Jane Doe', message)
        self.assertIn('INV-001 for 250.00', message)
        self.assertIn('Due date: 2024-03-15', message)

    def test_whatsapp_share_url_without_contact(self):
        self.assertIsNone(self.make_invoice().whatsapp_share_url())
