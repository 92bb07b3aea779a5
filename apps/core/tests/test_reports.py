"""
Reports Tests
=============

Test Coverage:
1. calc_growth() rounding and zero handling
2. Range keys
3. build_report() figures per owner
4. Reports page + JSON variant

Run tests:
    docker compose exec web python manage.py test apps.core.tests.test_reports
"""

import datetime
from decimal import Decimal

from django.test import TestCase, SimpleTestCase, Client
from django.urls import reverse
from django.utils import timezone
from django.contrib.auth import get_user_model

from apps.contacts.models import Contact
from apps.core.reports import build_report, calc_growth, get_range_days, month_starts
from apps.deals.models import Deal
from apps.tickets.models import Ticket

User = get_user_model()


class CalcGrowthTest(SimpleTestCase):
    """Test percent change helper"""

    def test_from_zero(self):
        self.assertEqual(calc_growth(5, 0), 100)
        self.assertEqual(calc_growth(0, 0), 0)

    def test_rounding(self):
        self.assertEqual(calc_growth(3, 4), -25)
        self.assertEqual(calc_growth(10, 4), 150)
        self.assertEqual(calc_growth(2, 3), -33)
        self.assertEqual(calc_growth(Decimal('150'), Decimal('100')), 50)

    def test_range_days(self):
        self.assertEqual(get_range_days('7d'), 7)
        self.assertEqual(get_range_days('90d'), 90)
        self.assertEqual(get_range_days('bogus'), 30)

    def test_month_starts(self):
        now = timezone.make_aware(datetime.datetime(2024, 2, 10, 12, 0))

        starts = month_starts(now)

        self.assertEqual(len(starts), 7)
        self.assertEqual((starts[0].year, starts[0].month), (2023, 9))
        self.assertEqual((starts[-2].year, starts[-2].month), (2024, 2))
        self.assertEqual((starts[-1].year, starts[-1].month), (2024, 3))


class BuildReportTest(TestCase):
    """Test report figures"""

    def setUp(self):
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123')
        self.other = User.objects.create_user(email='other@example.com', password='testpass123')

    def test_report_counts_only_owner_data(self):
        """
        Test: Two users with their own deals / contacts / tickets

        Expected: Totals include only the requesting user's rows
        """
        Deal.objects.create(owner=self.user, title='Won deal', value=Decimal('1000'), status='won')
        Deal.objects.create(owner=self.user, title='Open deal', value=Decimal('500'))
        Deal.objects.create(owner=self.other, title='Foreign', value=Decimal('9999'), status='won')
        Contact.objects.create(owner=self.user, name='Jane', phone='555')
        Ticket.objects.create(owner=self.user, subject='Broken', category='technical')

        report = build_report(self.user, '30d')
        stats = report['stats']

        self.assertEqual(stats['total_deals'], 2)
        self.assertEqual(stats['total_revenue'], Decimal('1000'))
        self.assertEqual(stats['total_contacts'], 1)
        self.assertEqual(stats['total_tickets'], 1)
        # Nothing in the previous period
        self.assertEqual(stats['deal_growth'], 100)
        self.assertEqual(stats['revenue_growth'], 100)

        self.assertEqual(len(report['monthly']), 6)
        self.assertEqual(report['monthly'][-1]['deals'], 2)

        self.assertEqual(
            [row['key'] for row in report['deals_by_status']],
            ['new', 'won']
        )
        self.assertEqual(report['tickets_by_category'], [{'key': 'technical', 'label': 'Technical', 'count': 1}])

    def test_growth_against_previous_period(self):
        deal = Deal.objects.create(owner=self.user, title='Old', value=Decimal('100'))
        Deal.objects.filter(pk=deal.pk).update(created_at=timezone.now() - datetime.timedelta(days=10))
        Deal.objects.create(owner=self.user, title='New 1')
        Deal.objects.create(owner=self.user, title='New 2')

        report = build_report(self.user, '7d')

        self.assertEqual(report['days'], 7)
        self.assertEqual(report['stats']['deal_growth'], 100)

    def test_unknown_range_falls_back(self):
        report = build_report(self.user, 'forever')

        self.assertEqual(report['range'], '30d')
        self.assertEqual(report['days'], 30)


class ReportsViewTest(TestCase):
    """Test reports page"""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123')
        self.client.login(email='owner@example.com', password='testpass123')
        Deal.objects.create(owner=self.user, title='Won deal', value=Decimal('1250.50'), status='won')

    def test_page_renders(self):
        response = self.client.get(reverse('core:reports'))

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'core/reports.html')
        self.assertEqual(response.context['report']['range'], '30d')

    def test_json_format(self):
        response = self.client.get(reverse('core:reports'), {'range': '7d', 'format': 'json'})
        data = response.json()

        self.assertEqual(data['range'], '7d')
        self.assertEqual(data['stats']['total_revenue'], 1250.5)
        self.assertEqual(data['stats']['total_deals'], 1)

    def test_login_required(self):
        self.client.logout()

        response = self.client.get(reverse('core:reports'))

        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('accounts:login'), response.url)
