import re

from django.db import models
from django.urls import reverse
from django.conf import settings
from taggit.managers import TaggableManager


class Contact(models.Model):

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='contacts', help_text='User who owns this contact')

    # Basic Information
    name = models.CharField(max_length=200, help_text="Contact's full name")
    email = models.EmailField(blank=True, help_text='Email address (optional)')
    phone = models.CharField(max_length=30, db_index=True, help_text='Phone number in international format')
    whatsapp = models.CharField(max_length=30, blank=True, help_text='WhatsApp number (defaults to phone)')
    company = models.CharField(max_length=200, blank=True, help_text='Company the contact works for')

    # Additional Information
    notes = models.TextField(blank=True, help_text='General notes about this contact')
    tags = TaggableManager(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True, help_text='When was this contact created')
    updated_at = models.DateTimeField(auto_now=True, help_text='When was this contact last updated')

    class Meta:
        verbose_name = 'Contact'
        verbose_name_plural = 'Contacts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='contact_owner_created_idx'),
            models.Index(fields=['owner', 'name'], name='contact_owner_name_idx'),
        ]

    def __str__(self):
        """String representation: Name (Phone)"""
        return f"{self.name} ({self.phone})"

    def save(self, *args, **kwargs):
        if not self.whatsapp:
            self.whatsapp = self.phone
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse('contacts:contact_detail', kwargs={'pk': self.pk})

    def get_initials(self):
        """Returns first letters for avatar: 'Jane Doe' → 'JD'"""
        parts = self.name.split()
        if len(parts) >= 2:
            return f"{parts[0][0]}{parts[1][0]}".upper()
        elif len(parts) == 1:
            return parts[0][0].upper()
        return "?"

    def get_tag_list(self):
        return sorted(tag.name for tag in self.tags.all())

    def whatsapp_digits(self):
        """Digits only, as wa.me links expect: '+1 (415) 555-0100' → '14155550100'"""
        return re.sub(r'\D', '', self.whatsapp or self.phone or '')

    def get_activities(self):
        """Activity timeline for this contact (newest first)"""
        return self.activities.all().select_related('deal').order_by('-created_at')
