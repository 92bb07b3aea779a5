# Models:
# 1. User - Custom user model (email login, owns every CRM row)
# 2. UserProfile - Notification & display preferences


from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.db import models
from django.utils import timezone
from django.core.validators import RegexValidator
from django.utils.translation import gettext_lazy as _



# USER MANAGER (handles user creation)
class UserManager(BaseUserManager):
    """
    Custom user manager for User model

    Provides methods to:
    - Create regular users
    - Create superusers (admins)
    - Handle email-based authentication
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user

        Args:
            email (str): User's email address (required)
            password (str): User's password (required)
            **extra_fields: Additional fields (first_name, company_name, etc.)

        Raises:
            ValueError: If email is not provided

        Example:
            user = User.objects.create_user(
                email='owner@acme.com',
                password='securepass123',
                first_name='Jane',
                company_name='Acme Inc'
            )
        """
        if not email:
            raise ValueError(_('Users must have an email address'))

        # Normalize email (convert domain to lowercase)
        email = self.normalize_email(email)

        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)

        user = self.model(email=email, **extra_fields)

        # Set password (hashed)
        user.set_password(password)
        user.save(using=self._db)

        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser (admin panel access)
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True'))

        return self.create_user(email, password, **extra_fields)



# USER MODEL
class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model for the CRM

    Every contact, deal, invoice, reminder, ticket and activity carries an
    ``owner`` foreign key to this model; a user only ever sees their own rows.
    """

    # Email as primary identifier (instead of username)
    email = models.EmailField(_('email address'), unique=True, max_length=255, db_index=True, help_text=_('Required. Used for login.'))
    first_name = models.CharField(_('first name'), max_length=50, blank=True, help_text=_("User's first name (e.g., Jane)"))
    last_name = models.CharField(_('last name'), max_length=50, blank=True, help_text=_("User's last name (e.g., Doe)"))

    # Phone validator (accepts: +201234567890, 01234567890, etc.)
    phone_validator = RegexValidator(regex=r'^\+?1?\d{9,15}$', message=_('Phone number must be entered in the format: +999999999. Up to 15 digits allowed.'))
    phone = models.CharField(_('phone number'), validators=[phone_validator], max_length=17, blank=True, help_text=_('Contact phone number (e.g., +14155550100)'))

    company_name = models.CharField(_('company name'), max_length=150, blank=True, help_text=_('Business name shown on invoices'))
    job_title = models.CharField(_('job title'), max_length=100, blank=True, help_text=_('e.g., Sales Manager, Founder'))
    avatar = models.ImageField(_('profile picture'), upload_to='avatars/%Y/%m/', blank=True, null=True, help_text=_('Profile picture (recommended: 300x300px, max 2MB)'))

    is_active = models.BooleanField(_('active'), default=True, help_text=_('Designates whether this user should be treated as active. Unselect this instead of deleting accounts.'))
    is_staff = models.BooleanField(_('staff status'), default=False, help_text=_('Designates whether the user can log into admin site.'))
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'

    # Fields required when creating superuser (in addition to email and password)
    REQUIRED_FIELDS = ['first_name', 'last_name']

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-date_joined']  # Newest first
        indexes = [
            models.Index(fields=['is_active'], name='user_is_active_idx'),
        ]

    def __str__(self):
        """
        Example:
            "Jane Doe (jane@acme.com)"
        """
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name} ({self.email})"
        return self.email

    # HELPER METHODS
    def get_full_name(self):
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        elif self.first_name:
            return self.first_name
        return self.email

    def get_short_name(self):

        return self.first_name if self.first_name else self.email

    def get_initials(self):
        """
        Returns:
            str: First letter of first name + first letter of last name
        """
        if self.first_name and self.last_name:
            return f"{self.first_name[0]}{self.last_name[0]}".upper()
        elif self.first_name:
            return self.first_name[0].upper()
        return self.email[0].upper()

    def set_full_name(self, full_name):
        """Split a single "full name" input into first / last name."""
        parts = (full_name or '').strip().split(None, 1)
        self.first_name = parts[0][:50] if parts else ''
        self.last_name = parts[1][:50] if len(parts) > 1 else ''

    def get_business_name(self):
        return self.company_name or self.get_full_name()



# USER PROFILE MODEL (Preferences)

class UserProfile(models.Model):
    """
    Notification and display preferences

    Automatically created when User is created (via signals)
    """

    CURRENCY_CHOICES = [
        ('USD', 'US Dollar'),
        ('EUR', 'Euro'),
        ('GBP', 'British Pound'),
        ('EGP', 'Egyptian Pound'),
        ('AED', 'UAE Dirham'),
        ('SAR', 'Saudi Riyal'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile', verbose_name=_('user'))
    email_notifications = models.BooleanField(_('email notifications'), default=True, help_text=_('Receive email updates about your account'))
    deal_updates = models.BooleanField(_('deal updates'), default=True, help_text=_('Get notified when deals change status'))
    reminder_alerts = models.BooleanField(_('reminder alerts'), default=True, help_text=_('Receive a daily digest of due and overdue reminders'))
    invoice_notifications = models.BooleanField(_('invoice notifications'), default=True, help_text=_('Get notified when invoices are paid or overdue'))
    currency = models.CharField(_('currency'), max_length=3, choices=CURRENCY_CHOICES, default='USD', help_text=_('Currency used to display amounts'))
    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)


    class Meta:
        verbose_name = _('user profile')
        verbose_name_plural = _('user profiles')

    def __str__(self):
        return f"Profile for: {self.user.get_full_name()}"

    def wants_email(self, kind):
        """
        Check a notification preference

        ``kind`` is one of 'deal', 'reminder', 'invoice'. The master
        ``email_notifications`` switch overrides every specific one.
        """
        if not self.email_notifications:
            return False
        return {
            'deal': self.deal_updates,
            'reminder': self.reminder_alerts,
            'invoice': self.invoice_notifications,
        }.get(kind, True)
