"""
Activity Timeline Tests
=======================

Test Coverage:
1. Logging an activity on a contact / deal (form post + AJAX)
2. Owner scoping of targets
3. Activity list filter and delete

Run tests:
    docker compose exec web python manage.py test apps.activities.tests.test_views
"""

from django.test import TestCase, Client
from django.urls import reverse
from django.contrib.auth import get_user_model

from apps.activities.models import Activity
from apps.contacts.models import Contact
from apps.deals.models import Deal

User = get_user_model()


class ActivityViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123')
        self.other = User.objects.create_user(email='other@example.com', password='testpass123')
        self.client.login(email='owner@example.com', password='testpass123')

        self.contact = Contact.objects.create(owner=self.user, name='Jane', phone='555')
        self.deal = Deal.objects.create(owner=self.user, contact=self.contact, title='Website')
        self.foreign_contact = Contact.objects.create(owner=self.other, name='Foreign', phone='556')

    def test_log_on_contact(self):
        response = self.client.post(reverse('activities:activity_create'), {
            'type': 'call',
            'title': 'Called about pricing',
            'contact': self.contact.pk,
        })

        self.assertRedirects(response, reverse('contacts:contact_detail', args=[self.contact.pk]))
        activity = Activity.objects.get()
        self.assertEqual(activity.owner, self.user)
        self.assertEqual(activity.get_icon(), 'fas fa-phone')

    def test_log_on_deal_fills_contact(self):
        """
        Test: Activity logged on a deal only

        Expected: Contact taken from the deal, redirect to the deal page
        """
        response = self.client.post(reverse('activities:activity_create'), {
            'type': 'meeting',
            'title': 'Kickoff',
            'deal': self.deal.pk,
        })

        self.assertRedirects(response, reverse('deals:deal_detail', args=[self.deal.pk]))
        self.assertEqual(Activity.objects.get().contact, self.contact)

    def test_log_ajax(self):
        response = self.client.post(
            reverse('activities:activity_create'),
            {'type': 'note', 'title': 'Prefers e-mail', 'contact': self.contact.pk},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )
        data = response.json()

        self.assertTrue(data['success'])
        self.assertEqual(data['activity']['type_display'], 'Note')

    def test_title_required(self):
        response = self.client.post(
            reverse('activities:activity_create'),
            {'type': 'note', 'title': '', 'contact': self.contact.pk},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )

        self.assertFalse(response.json()['success'])
        self.assertIn('title', response.json()['errors'])
        self.assertFalse(Activity.objects.exists())

    def test_foreign_contact_rejected(self):
        self.client.post(reverse('activities:activity_create'), {
            'type': 'note',
            'title': 'Sneaky',
            'contact': self.foreign_contact.pk,
        })

        self.assertFalse(Activity.objects.exists())

    def test_list_filter_by_type(self):
        Activity.log(owner=self.user, contact=self.contact, title='Call', type='call')
        Activity.log(owner=self.user, contact=self.contact, title='Note', type='note')
        Activity.log(owner=self.other, title='Foreign call', type='call')

        response = self.client.get(reverse('activities:activity_list'), {'type': 'call'})

        self.assertEqual([a.title for a in response.context['activities']], ['Call'])

    def test_delete(self):
        activity = Activity.log(owner=self.user, deal=self.deal, title='Call', type='call')

        response = self.client.post(reverse('activities:activity_delete', args=[activity.pk]))

        self.assertRedirects(response, reverse('deals:deal_detail', args=[self.deal.pk]))
        self.assertFalse(Activity.objects.exists())

    def test_delete_foreign_is_404(self):
        activity = Activity.log(owner=self.other, title='Foreign')

        response = self.client.post(reverse('activities:activity_delete', args=[activity.pk]))

        self.assertEqual(response.status_code, 404)
        self.assertTrue(Activity.objects.filter(pk=activity.pk).exists())
