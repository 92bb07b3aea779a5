"""
Deal Views Tests
================

Test Coverage:
1. List filters + totals
2. Kanban columns
3. Create (value parsing, ?contact= prefill) / Edit
4. Status change (AJAX + form post)
5. Owner scoping

Run tests:
    docker compose exec web python manage.py test apps.deals.tests.test_views
"""

from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, Client
from django.urls import reverse
from django.contrib.auth import get_user_model

from apps.activities.models import Activity
from apps.contacts.models import Contact
from apps.deals.models import Deal

User = get_user_model()


class DealViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123')
        self.other = User.objects.create_user(email='other@example.com', password='testpass123')
        self.client.login(email='owner@example.com', password='testpass123')

        self.contact = Contact.objects.create(owner=self.user, name='Jane', phone='555')
        self.foreign_contact = Contact.objects.create(owner=self.other, name='Foreign', phone='556')

        self.new_deal = Deal.objects.create(owner=self.user, contact=self.contact, title='Website', value=Decimal('1000'))
        self.won_deal = Deal.objects.create(owner=self.user, title='Hosting', value=Decimal('300'), status='won')
        self.lost_deal = Deal.objects.create(owner=self.user, title='Logo', value=Decimal('50'), status='lost')
        self.foreign_deal = Deal.objects.create(owner=self.other, title='Foreign', value=Decimal('9999'))

    def test_list_totals(self):
        response = self.client.get(reverse('deals:deal_list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_count'], 3)
        self.assertEqual(response.context['totals']['pipeline_value'], Decimal('1300'))
        self.assertEqual(response.context['totals']['won_value'], Decimal('300'))
        self.assertEqual(response.context['status_counts'], {'new': 1, 'won': 1, 'lost': 1})

    def test_list_filters(self):
        response = self.client.get(reverse('deals:deal_list'), {'status': 'won'})
        self.assertEqual(list(response.context['deals']), [self.won_deal])

        response = self.client.get(reverse('deals:deal_list'), {'q': 'jane'})
        self.assertEqual(list(response.context['deals']), [self.new_deal])

    def test_kanban_columns(self):
        """
        Test: Kanban board

        Expected: One column per status in pipeline order with count / value
        """
        response = self.client.get(reverse('deals:deal_kanban'))
        columns = response.context['columns']

        self.assertEqual([c['status'] for c in columns], ['new', 'quoted', 'negotiating', 'won', 'lost'])
        self.assertEqual(columns[0]['count'], 1)
        self.assertEqual(columns[0]['value'], Decimal('1000'))
        self.assertEqual(columns[1]['count'], 0)
        self.assertEqual(response.context['total_count'], 3)

    def test_create_parses_value(self):
        response = self.client.post(reverse('deals:deal_create'), {
            'title': 'Redesign',
            'contact': self.contact.pk,
            'value': '$1,500.555',
            'status': 'new',
        })

        deal = Deal.objects.get(title='Redesign')
        self.assertRedirects(response, reverse('deals:deal_detail', args=[deal.pk]))
        self.assertEqual(deal.owner, self.user)
        self.assertEqual(deal.value, Decimal('1500.56'))

    def test_create_invalid_value_becomes_zero(self):
        self.client.post(reverse('deals:deal_create'), {'title': 'Free', 'value': 'abc', 'status': 'new'})

        self.assertEqual(Deal.objects.get(title='Free').value, Decimal('0'))

    def test_create_rejects_oversized_value(self):
        """
        Test: Value in scientific notation, far past the column size

        Expected: Form error on value, no deal saved
        """
        response = self.client.post(reverse('deals:deal_create'), {'title': 'Moonshot', 'value': '1e30', 'status': 'new'})

        self.assertEqual(response.status_code, 200)
        self.assertIn('Value is too large', response.context['form'].errors['value'])
        self.assertFalse(Deal.objects.filter(title='Moonshot').exists())

    def test_create_rejects_foreign_contact(self):
        response = self.client.post(reverse('deals:deal_create'), {
            'title': 'Sneaky',
            'contact': self.foreign_contact.pk,
            'status': 'new',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('contact', response.context['form'].errors)
        self.assertFalse(Deal.objects.filter(title='Sneaky').exists())

    def test_create_prefills_contact(self):
        response = self.client.get(reverse('deals:deal_create'), {'contact': self.contact.pk})
        self.assertEqual(response.context['form'].initial['contact'], str(self.contact.pk))

        response = self.client.get(reverse('deals:deal_create'), {'contact': 'abc'})
        self.assertNotIn('contact', response.context['form'].initial)

    def test_edit_status_change_logged(self):
        response = self.client.post(reverse('deals:deal_edit', args=[self.new_deal.pk]), {
            'title': 'Website v2',
            'contact': self.contact.pk,
            'value': '1200',
            'status': 'negotiating',
        })

        self.assertRedirects(response, reverse('deals:deal_detail', args=[self.new_deal.pk]))
        self.new_deal.refresh_from_db()
        self.assertEqual(self.new_deal.title, 'Website v2')
        self.assertEqual(self.new_deal.status, 'negotiating')
        self.assertTrue(Activity.objects.filter(deal=self.new_deal, title__contains='Negotiating').exists())

    def test_edit_rolls_back_when_status_log_fails(self):
        """
        Test: Timeline write fails while saving an edit with a new status

        Expected: Error message, neither the field edits nor the status are saved
        """
        with mock.patch('apps.activities.models.Activity.log', side_effect=DatabaseError('disk full')):
            response = self.client.post(reverse('deals:deal_edit', args=[self.new_deal.pk]), {
                'title': 'Website v2',
                'contact': self.contact.pk,
                'value': '1200',
                'status': 'negotiating',
            })

        self.assertEqual(response.status_code, 200)
        self.new_deal.refresh_from_db()
        self.assertEqual(self.new_deal.title, 'Website')
        self.assertEqual(self.new_deal.value, Decimal('1000'))
        self.assertEqual(self.new_deal.status, 'new')

    def test_change_status_ajax(self):
        response = self.client.post(
            reverse('deals:deal_change_status', args=[self.new_deal.pk]),
            {'status': 'quoted'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )

        self.assertEqual(response.json(), {'success': True, 'status': 'quoted', 'status_display': 'Quoted'})

    def test_change_status_invalid(self):
        response = self.client.post(
            reverse('deals:deal_change_status', args=[self.new_deal.pk]),
            {'status': 'bogus'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(reverse('deals:deal_change_status', args=[self.new_deal.pk]), {'status': 'bogus'})
        self.assertRedirects(response, reverse('deals:deal_detail', args=[self.new_deal.pk]))

        self.new_deal.refresh_from_db()
        self.assertEqual(self.new_deal.status, 'new')

    def test_foreign_deal_is_404(self):
        for name in ('deals:deal_detail', 'deals:deal_edit'):
            self.assertEqual(self.client.get(reverse(name, args=[self.foreign_deal.pk])).status_code, 404)
        response = self.client.post(reverse('deals:deal_change_status', args=[self.foreign_deal.pk]), {'status': 'won'})
        self.assertEqual(response.status_code, 404)

    def test_detail_page(self):
        response = self.client.get(reverse('deals:deal_detail', args=[self.new_deal.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['deal'], self.new_deal)

    def test_delete(self):
        response = self.client.post(reverse('deals:deal_delete', args=[self.lost_deal.pk]))

        self.assertRedirects(response, reverse('deals:deal_list'))
        self.assertFalse(Deal.objects.filter(pk=self.lost_deal.pk).exists())
