"""
Ticket Views Tests
==================

Run tests:
    docker compose exec web python manage.py test apps.tickets.tests.test_views
"""

from django.test import TestCase, Client
from django.urls import reverse
from django.contrib.auth import get_user_model

from apps.contacts.models import Contact
from apps.tickets.models import Ticket
from apps.tickets.views import ticket_stats

User = get_user_model()


class TicketViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123', first_name='Agent', last_name='Smith')
        self.other = User.objects.create_user(email='other@example.com', password='testpass123')
        self.client.login(email='owner@example.com', password='testpass123')

        self.contact = Contact.objects.create(owner=self.user, name='Jane', phone='555')
        self.ticket = Ticket.objects.create(owner=self.user, contact=self.contact, subject='Login broken', category='technical')
        self.foreign = Ticket.objects.create(owner=self.other, subject='Foreign')

    def test_stats(self):
        Ticket.objects.create(owner=self.user, subject='Billing', status='in_progress')
        Ticket.objects.create(owner=self.user, subject='Done', status='resolved')
        Ticket.objects.create(owner=self.user, subject='Archived', status='closed')

        stats = ticket_stats(Ticket.objects.filter(owner=self.user))

        self.assertEqual(stats, {'total': 4, 'open': 1, 'in_progress': 1, 'waiting': 0, 'resolved': 2})

    def test_list_tabs_and_search(self):
        Ticket.objects.create(owner=self.user, subject='Invoice question', status='waiting')

        response = self.client.get(reverse('tickets:ticket_list'), {'status': 'waiting'})
        self.assertEqual([t.subject for t in response.context['tickets']], ['Invoice question'])

        response = self.client.get(reverse('tickets:ticket_list'), {'q': 'jane'})
        self.assertEqual([t.subject for t in response.context['tickets']], ['Login broken'])

        response = self.client.get(reverse('tickets:ticket_list'), {'status': 'nonsense'})
        self.assertEqual(response.context['current_tab'], 'all')
        self.assertEqual(response.context['stats']['total'], 2)

    def test_create(self):
        response = self.client.post(reverse('tickets:ticket_create'), {
            'subject': 'Refund request',
            'contact': self.contact.pk,
            'status': 'open',
            'priority': 'urgent',
            'category': 'billing',
        })

        ticket = Ticket.objects.get(subject='Refund request')
        self.assertRedirects(response, reverse('tickets:ticket_detail', args=[ticket.pk]))
        self.assertEqual(ticket.owner, self.user)
        self.assertTrue(ticket.ticket_number.startswith('TKT-'))

    def test_create_requires_subject(self):
        response = self.client.post(reverse('tickets:ticket_create'), {
            'subject': '', 'status': 'open', 'priority': 'low', 'category': 'general',
        })

        self.assertIn('Subject is required', response.context['form'].errors['subject'])

    def test_reply(self):
        """
        Test: Reply to a ticket (AJAX)

        Expected: Message added to the thread with the author's name
        """
        response = self.client.post(
            reverse('tickets:ticket_reply', args=[self.ticket.pk]),
            {'message': 'We are looking into it', 'is_internal': 'on'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )
        data = response.json()

        self.assertTrue(data['success'])
        self.assertEqual(data['message']['author'], 'Agent Smith')
        self.assertTrue(data['message']['is_internal'])
        self.assertEqual(self.ticket.messages.count(), 1)

    def test_reply_empty(self):
        response = self.client.post(
            reverse('tickets:ticket_reply', args=[self.ticket.pk]),
            {'message': '   '},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Message cannot be empty')
        self.assertEqual(self.ticket.messages.count(), 0)

    def test_reply_form_post_redirects(self):
        response = self.client.post(reverse('tickets:ticket_reply', args=[self.ticket.pk]), {'message': 'Hello'})

        self.assertRedirects(response, reverse('tickets:ticket_detail', args=[self.ticket.pk]))

    def test_detail_thread(self):
        self.ticket.add_message(self.user, 'First reply')

        response = self.client.get(reverse('tickets:ticket_detail', args=[self.ticket.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'First reply')

    def test_change_status(self):
        response = self.client.post(
            reverse('tickets:ticket_change_status', args=[self.ticket.pk]),
            {'status': 'resolved'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )
        data = response.json()

        self.assertEqual(data['status'], 'resolved')
        self.assertIsNotNone(data['resolved_at'])

    def test_foreign_ticket_is_404(self):
        self.assertEqual(self.client.get(reverse('tickets:ticket_detail', args=[self.foreign.pk])).status_code, 404)
        response = self.client.post(reverse('tickets:ticket_reply', args=[self.foreign.pk]), {'message': 'Hi'})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.foreign.messages.count(), 0)

    def test_delete_removes_thread(self):
        self.ticket.add_message(self.user, 'Reply')

        response = self.client.post(reverse('tickets:ticket_delete', args=[self.ticket.pk]))

        self.assertRedirects(response, reverse('tickets:ticket_list'))
        self.assertFalse(Ticket.objects.filter(pk=self.ticket.pk).exists())
