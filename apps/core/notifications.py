"""
E-mail notifications

Every notification goes through notify(), which respects the user's
preferences (UserProfile.wants_email) and never lets a mail failure
break the request or task that triggered it.
"""

import logging
import smtplib

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def notify(user, kind, subject, message):
    """
    Send a plain-text e-mail to ``user`` if they opted in to ``kind``

    Args:
        user: recipient
        kind: 'deal', 'reminder' or 'invoice'
        subject: e-mail subject
        message: plain-text body

    Returns:
        bool: True if the e-mail was handed to the mail backend
    """
    if not user.email:
        return False

    profile = getattr(user, 'profile', None)
    if profile is not None and not profile.wants_email(kind):
        return False

    try:
        send_mail(
            subject,
            message,
            settings.DEFAULT_FROM_EMAIL,
            [user.email],
            fail_silently=False,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.warning("Sending %s e-mail to %s failed: %s", kind, user.email, e)
        return False

    logger.debug("Sent %s e-mail to %s", kind, user.email)
    return True
