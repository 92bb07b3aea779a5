from django.db import models
from django.conf import settings


class Activity(models.Model):

    # Activity type choices
    TYPE_CHOICES = [
        ('note', 'Note'),
        ('call', 'Call'),
        ('email', 'Email'),
        ('meeting', 'Meeting'),
        ('whatsapp', 'WhatsApp'),
        ('other', 'Other'),
    ]

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='activities', help_text='User who owns this activity')
    contact = models.ForeignKey('contacts.Contact', on_delete=models.CASCADE, null=True, blank=True, related_name='activities', help_text='Contact this activity is about')
    deal = models.ForeignKey('deals.Deal', on_delete=models.CASCADE, null=True, blank=True, related_name='activities', help_text='Deal this activity is about')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='note', help_text='Type of activity')
    title = models.CharField(max_length=200, help_text='Short summary of what happened')
    description = models.TextField(blank=True, help_text='Details')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True, help_text='When did this activity occur')

    class Meta:
        verbose_name = 'Activity'
        verbose_name_plural = 'Activities'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='activity_owner_created_idx'),
        ]

    def __str__(self):
        return f"{self.get_type_display()}: {self.title}"

    @classmethod
    def log(cls, owner, title, type='other', contact=None, deal=None, description=''):
        """Record an automatic timeline entry (e.g. a deal status change)."""
        if contact is None and deal is not None:
            contact = deal.contact
        return cls.objects.create(
            owner=owner,
            contact=contact,
            deal=deal,
            type=type,
            title=title,
            description=description,
        )

    def get_icon(self):
        return {
            'note': 'fas fa-sticky-note',
            'call': 'fas fa-phone',
            'email': 'fas fa-envelope',
            'meeting': 'fas fa-users',
            'whatsapp': 'fab fa-whatsapp',
        }.get(self.type, 'fas fa-circle')
