"""
Accounts Views Tests
====================

Test Coverage:
1. Signup - account creation, auto login, duplicate email
2. Login / Logout
3. Settings - profile and notification preferences
4. Profile auto-creation signal

Run tests:
    docker compose exec web python manage.py test apps.accounts.tests.test_views
"""

from django.test import TestCase, Client
from django.urls import reverse
from django.contrib.auth import get_user_model

from apps.accounts.models import UserProfile

User = get_user_model()


class SignupViewTest(TestCase):
    """Test signup flow"""

    def setUp(self):
        self.client = Client()

    def test_signup_creates_user_and_logs_in(self):
        """
        Test: Valid signup

        Expected: User created with split name, logged in, redirected to dashboard
        """
        response = self.client.post(reverse('accounts:signup'), {
            'full_name': 'Jane Doe',
            'company_name': 'Acme Inc',
            'email': 'Jane@Example.com',
            'password1': 'secret123',
            'password2': 'secret123',
        })

        self.assertRedirects(response, reverse('core:dashboard'))

        user = User.objects.get(email='jane@example.com')
        self.assertEqual(user.first_name, 'Jane')
        self.assertEqual(user.last_name, 'Doe')
        self.assertEqual(user.company_name, 'Acme Inc')
        self.assertEqual(int(self.client.session['_auth_user_id']), user.pk)

    def test_signup_duplicate_email_rejected(self):
        User.objects.create_user(email='jane@example.com', password='testpass123')

        response = self.client.post(reverse('accounts:signup'), {
            'full_name': 'Jane Doe',
            'email': 'jane@example.com',
            'password1': 'secret123',
            'password2': 'secret123',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('email', response.context['form'].errors)
        self.assertEqual(User.objects.filter(email='jane@example.com').count(), 1)

    def test_signup_short_password_rejected(self):
        """
        Test: Password shorter than 6 characters

        Expected: Form error, no user
        """
        response = self.client.post(reverse('accounts:signup'), {
            'full_name': 'Jane Doe',
            'email': 'jane@example.com',
            'password1': 'abc',
            'password2': 'abc',
        })

        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(email='jane@example.com').exists())


class LoginViewTest(TestCase):
    """Test login / logout"""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            email='test@test.com',
            password='testpass123',
            first_name='Test'
        )

    def test_login_page_renders(self):
        response = self.client.get(reverse('accounts:login'))

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'accounts/login.html')

    def test_login_success(self):
        response = self.client.post(reverse('accounts:login'), {
            'email': 'test@test.com',
            'password': 'testpass123',
        })

        self.assertRedirects(response, reverse('core:dashboard'))

    def test_login_wrong_password(self):
        response = self.client.post(reverse('accounts:login'), {
            'email': 'test@test.com',
            'password': 'wrong-password',
        })

        self.assertEqual(response.status_code, 200)
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_login_respects_safe_next(self):
        response = self.client.post(reverse('accounts:login') + '?next=/contacts/', {
            'email': 'test@test.com',
            'password': 'testpass123',
        })

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, '/contacts/')

    def test_login_ignores_external_next(self):
        response = self.client.post(reverse('accounts:login') + '?next=https://evil.example.com/', {
            'email': 'test@test.com',
            'password': 'testpass123',
        })

        self.assertRedirects(response, reverse('core:dashboard'))

    def test_logout(self):
        self.client.login(email='test@test.com', password='testpass123')

        response = self.client.get(reverse('accounts:logout'))

        self.assertRedirects(response, reverse('accounts:login'))
        self.assertNotIn('_auth_user_id', self.client.session)


class SettingsViewTest(TestCase):
    """Test profile settings"""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            email='test@test.com',
            password='testpass123',
            first_name='Test'
        )
        self.client.login(email='test@test.com', password='testpass123')

    def test_profile_created_by_signal(self):
        """
        Test: New users get a profile

        Expected: UserProfile exists with notifications on
        """
        profile = UserProfile.objects.get(user=self.user)

        self.assertTrue(profile.email_notifications)
        self.assertTrue(profile.wants_email('deal'))

    def test_settings_saves_profile_and_preferences(self):
        response = self.client.post(reverse('accounts:settings'), {
            'first_name': 'Updated',
            'last_name': 'Name',
            'phone': '',
            'company_name': 'New Co',
            'job_title': 'Founder',
            'email_notifications': 'on',
            'deal_updates': '',
            'reminder_alerts': 'on',
            'invoice_notifications': 'on',
            'currency': 'EUR',
        })

        self.assertRedirects(response, reverse('accounts:settings'))

        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, 'Updated')
        self.assertEqual(self.user.job_title, 'Founder')
        self.assertEqual(self.user.profile.currency, 'EUR')
        self.assertFalse(self.user.profile.deal_updates)
        self.assertFalse(self.user.profile.wants_email('deal'))

    def test_master_switch_overrides_specific_preferences(self):
        profile = self.user.profile
        profile.email_notifications = False
        profile.save()

        self.assertFalse(profile.wants_email('invoice'))
        self.assertFalse(profile.wants_email('reminder'))
