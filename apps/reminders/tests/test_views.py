"""
Reminder Views Tests
====================

Run tests:
    docker compose exec web python manage.py test apps.reminders.tests.test_views
"""

import datetime

from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone
from django.contrib.auth import get_user_model

from apps.contacts.models import Contact
from apps.deals.models import Deal
from apps.reminders.models import Reminder

User = get_user_model()


class ReminderViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123')
        self.other = User.objects.create_user(email='other@example.com', password='testpass123')
        self.client.login(email='owner@example.com', password='testpass123')

        self.contact = Contact.objects.create(owner=self.user, name='Jane', phone='555')
        self.deal = Deal.objects.create(owner=self.user, contact=self.contact, title='Website')
        self.reminder = Reminder.objects.create(owner=self.user, title='Call', due_date=timezone.now() - datetime.timedelta(days=2))
        self.foreign = Reminder.objects.create(owner=self.other, title='Foreign', due_date=timezone.now())

    def test_list_counts_and_filter(self):
        response = self.client.get(reverse('reminders:reminder_list'), {'filter': 'overdue'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['current_filter'], 'overdue')
        self.assertEqual(list(response.context['reminders']), [self.reminder])
        self.assertEqual(response.context['counts']['all'], 1)
        self.assertEqual(response.context['counts']['overdue'], 1)

    def test_unknown_filter_shows_all(self):
        response = self.client.get(reverse('reminders:reminder_list'), {'filter': 'someday'})

        self.assertEqual(response.context['current_filter'], 'all')

    def test_create(self):
        due = (timezone.localdate() + datetime.timedelta(days=1)).isoformat()

        response = self.client.post(reverse('reminders:reminder_create'), {
            'title': 'Send proposal',
            'due_date': f'{due}T10:30',
            'priority': 'high',
            'deal': self.deal.pk,
        })

        self.assertRedirects(response, reverse('reminders:reminder_list'))
        reminder = Reminder.objects.get(title='Send proposal')
        self.assertEqual(reminder.owner, self.user)
        self.assertEqual(timezone.localtime(reminder.due_date).hour, 10)

    def test_create_requires_due_date(self):
        response = self.client.post(reverse('reminders:reminder_create'), {'title': 'No date', 'priority': 'low'})

        self.assertEqual(response.status_code, 200)
        self.assertIn('Due date is required', response.context['form'].errors['due_date'])

    def test_create_defaults(self):
        """
        Test: Open the form from a deal

        Expected: Tomorrow 9:00, deal and its contact preselected
        """
        response = self.client.get(reverse('reminders:reminder_create'), {'deal': self.deal.pk})
        initial = response.context['form'].initial

        due = timezone.localtime(initial['due_date'])
        self.assertEqual(due.date(), timezone.localdate() + datetime.timedelta(days=1))
        self.assertEqual(due.hour, 9)
        self.assertEqual(initial['deal'], self.deal.pk)
        self.assertEqual(initial['contact'], self.contact.pk)

    def test_toggle_ajax(self):
        response = self.client.post(
            reverse('reminders:reminder_toggle', args=[self.reminder.pk]),
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )
        data = response.json()

        self.assertTrue(data['success'])
        self.assertTrue(data['is_completed'])
        self.assertIsNotNone(data['completed_at'])

        response = self.client.post(reverse('reminders:reminder_toggle', args=[self.reminder.pk]))
        self.assertRedirects(response, reverse('reminders:reminder_list'))
        self.reminder.refresh_from_db()
        self.assertFalse(self.reminder.is_completed)

    def test_foreign_reminder_is_404(self):
        self.assertEqual(self.client.get(reverse('reminders:reminder_edit', args=[self.foreign.pk])).status_code, 404)
        self.assertEqual(self.client.post(reverse('reminders:reminder_toggle', args=[self.foreign.pk])).status_code, 404)
        self.assertEqual(self.client.post(reverse('reminders:reminder_delete', args=[self.foreign.pk])).status_code, 404)

    def test_delete(self):
        response = self.client.post(reverse('reminders:reminder_delete', args=[self.reminder.pk]))

        self.assertRedirects(response, reverse('reminders:reminder_list'))
        self.assertFalse(Reminder.objects.filter(owner=self.user).exists())
