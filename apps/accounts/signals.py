import logging

from django.conf import settings
from django.db.models.signals import post_save, pre_delete
from django.dispatch import receiver
from django.contrib.auth import get_user_model
from .models import UserProfile


User = get_user_model()
logger = logging.getLogger(__name__)


# SIGNAL 1: AUTO-CREATE USER PROFILE
@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        profile, created_profile = UserProfile.objects.get_or_create(user=instance)
        if created_profile:
            profile.currency = getattr(settings, 'CRM_DEFAULT_CURRENCY', 'USD')
            profile.save()

        logger.info("Profile created for user: %s", instance.email)


# SIGNAL 2: CLEANUP ON USER DELETION
@receiver(pre_delete, sender=User)
def delete_user_cleanup(sender, instance, **kwargs):
    # Delete avatar file from storage (if exists)
    if instance.avatar:
        try:
            instance.avatar.delete(save=False)
        except OSError as e:
            logger.warning("Error deleting avatar for %s: %s", instance.email, e)

    # CRM rows cascade through their owner foreign keys
    logger.info("User deleted: %s (%s)", instance.email, instance.get_full_name())
