from decimal import Decimal

from django.db import models
from django.urls import reverse
from django.conf import settings

from apps.core.notifications import notify


class Deal(models.Model):

    # Status choices (pipeline columns, in order)
    STATUS_CHOICES = [
        ('new', 'New'),
        ('quoted', 'Quoted'),
        ('negotiating', 'Negotiating'),
        ('won', 'Won'),
        ('lost', 'Lost'),
    ]

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='deals', help_text='User who owns this deal')
    contact = models.ForeignKey('contacts.Contact', on_delete=models.SET_NULL, null=True, blank=True, related_name='deals', help_text='Customer for this deal')

    title = models.CharField(max_length=200, help_text='What is being sold')
    value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'), help_text='Expected deal value')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='new', db_index=True, help_text='Pipeline stage')
    description = models.TextField(blank=True, help_text='Deal details')
    expected_close_date = models.DateField(null=True, blank=True, help_text='When is the deal expected to close?')

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Deal'
        verbose_name_plural = 'Deals'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'status'], name='deal_owner_status_idx'),
            models.Index(fields=['owner', '-created_at'], name='deal_owner_created_idx'),
        ]

    def __str__(self):
        return f"{self.title} - {self.get_status_display()}"

    def get_absolute_url(self):
        return reverse('deals:deal_detail', kwargs={'pk': self.pk})

    def is_closed(self):
        return self.status in ['won', 'lost']

    def change_status(self, new_status, user=None):
        """
        Move the deal to another pipeline column

        Any value in STATUS_CHOICES is accepted. Logs an activity on the
        timeline and e-mails the owner when a deal is won or lost.

        Raises:
            ValueError: unknown status
        """
        if new_status not in dict(self.STATUS_CHOICES):
            raise ValueError(f'Invalid status: {new_status}')

        old_status = self.status
        if old_status == new_status:
            return False

        self.status = new_status
        self.save(update_fields=['status', 'updated_at'])

        # Imported lazily: activities depends on this model
        from apps.activities.models import Activity

        status_display = dict(self.STATUS_CHOICES).get(new_status, new_status)
        old_status_display = dict(self.STATUS_CHOICES).get(old_status, old_status)
        Activity.log(
            owner=user or self.owner,
            deal=self,
            title=f'Status changed from "{old_status_display}" to "{status_display}"',
        )

        if self.is_closed():
            notify(
                self.owner,
                'deal',
                f'Deal {status_display.lower()}: {self.title}',
                f'Your deal "{self.title}" ({self.value}) was marked as {status_display}.'
            )

        return True
