"""
Contact Views Tests
===================

Test Coverage:
1. List - owner scoping, search, tag filter
2. Create / Edit / Delete
3. JSON + autocomplete endpoints
4. Other users' contacts → 404

Run tests:
    docker compose exec web python manage.py test apps.contacts.tests.test_views
"""

from django.test import TestCase, Client
from django.urls import reverse
from django.contrib.auth import get_user_model

from apps.contacts.models import Contact

User = get_user_model()


class ContactViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(email='owner@example.com', password='testpass123', first_name='Owner')
        self.other = User.objects.create_user(email='other@example.com', password='testpass123')
        self.client.login(email='owner@example.com', password='testpass123')

        self.jane = Contact.objects.create(owner=self.user, name='Jane Doe', phone='555-0100', email='jane@acme.com', company='Acme')
        self.jane.tags.set(['vip'])
        self.john = Contact.objects.create(owner=self.user, name='John Roe', phone='555-0200', company='Globex')
        self.foreign = Contact.objects.create(owner=self.other, name='Jane Foreign', phone='555-0300')

    def test_list_shows_only_own_contacts(self):
        response = self.client.get(reverse('contacts:contact_list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_count'], 2)
        self.assertNotIn(self.foreign, list(response.context['contacts']))

    def test_list_search(self):
        """
        Test: Search "jane"

        Expected: Only the owner's Jane (not the other user's)
        """
        response = self.client.get(reverse('contacts:contact_list'), {'q': 'jane'})

        self.assertEqual(list(response.context['contacts']), [self.jane])

    def test_list_search_by_company(self):
        response = self.client.get(reverse('contacts:contact_list'), {'q': 'globex'})

        self.assertEqual(list(response.context['contacts']), [self.john])

    def test_list_tag_filter(self):
        response = self.client.get(reverse('contacts:contact_list'), {'tag': 'VIP'})

        self.assertEqual(list(response.context['contacts']), [self.jane])

    def test_create_contact(self):
        response = self.client.post(reverse('contacts:contact_create'), {
            'name': '  Ann Lee ',
            'phone': '555-0400',
            'email': 'ANN@EXAMPLE.COM',
            'tags': 'lead, client',
        })

        contact = Contact.objects.get(name='Ann Lee')
        self.assertRedirects(response, reverse('contacts:contact_detail', args=[contact.pk]))
        self.assertEqual(contact.owner, self.user)
        self.assertEqual(contact.email, 'ann@example.com')
        self.assertEqual(contact.whatsapp, '555-0400')
        self.assertEqual(contact.get_tag_list(), ['client', 'lead'])

    def test_create_requires_name_and_phone(self):
        response = self.client.post(reverse('contacts:contact_create'), {'name': '', 'phone': ''})

        self.assertEqual(response.status_code, 200)
        self.assertIn('name', response.context['form'].errors)
        self.assertIn('phone', response.context['form'].errors)
        self.assertEqual(Contact.objects.filter(owner=self.user).count(), 2)

    def test_edit_contact(self):
        response = self.client.post(reverse('contacts:contact_edit', args=[self.jane.pk]), {
            'name': 'Jane Smith',
            'phone': '555-0100',
            'whatsapp': '555-9999',
            'tags': 'vip',
        })

        self.assertRedirects(response, reverse('contacts:contact_detail', args=[self.jane.pk]))
        self.jane.refresh_from_db()
        self.assertEqual(self.jane.name, 'Jane Smith')
        self.assertEqual(self.jane.whatsapp, '555-9999')

    def test_edit_page_renders_tags(self):
        response = self.client.get(reverse('contacts:contact_edit', args=[self.jane.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'value="vip"')

    def test_detail_page(self):
        response = self.client.get(reverse('contacts:contact_detail', args=[self.jane.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['contact'], self.jane)
        self.assertIn('activity_form', response.context)

    def test_foreign_contact_is_404(self):
        """
        Test: Open / edit / delete another user's contact

        Expected: 404 every time, row untouched
        """
        self.assertEqual(self.client.get(reverse('contacts:contact_detail', args=[self.foreign.pk])).status_code, 404)
        self.assertEqual(self.client.get(reverse('contacts:contact_edit', args=[self.foreign.pk])).status_code, 404)
        self.assertEqual(self.client.post(reverse('contacts:contact_delete', args=[self.foreign.pk])).status_code, 404)
        self.assertTrue(Contact.objects.filter(pk=self.foreign.pk).exists())

    def test_delete_contact(self):
        response = self.client.post(reverse('contacts:contact_delete', args=[self.john.pk]))

        self.assertRedirects(response, reverse('contacts:contact_list'))
        self.assertFalse(Contact.objects.filter(pk=self.john.pk).exists())

    def test_delete_ajax(self):
        response = self.client.post(
            reverse('contacts:contact_delete', args=[self.john.pk]),
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )

        self.assertEqual(response.json(), {'success': True})

    def test_delete_requires_post(self):
        response = self.client.get(reverse('contacts:contact_delete', args=[self.john.pk]))

        self.assertEqual(response.status_code, 405)

    def test_contact_json(self):
        response = self.client.get(reverse('contacts:contact_json', args=[self.jane.pk]))
        data = response.json()

        self.assertEqual(data['name'], 'Jane Doe')
        self.assertEqual(data['tags'], ['vip'])
        self.assertEqual(data['initials'], 'JD')

        response = self.client.get(reverse('contacts:contact_json', args=[self.foreign.pk]))
        self.assertEqual(response.status_code, 404)

    def test_autocomplete(self):
        response = self.client.get(reverse('contacts:contact_search'), {'q': 'j'})
        names = [row['name'] for row in response.json()['results']]

        self.assertEqual(names, ['Jane Doe', 'John Roe'])
