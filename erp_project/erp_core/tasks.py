import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def send_contact_invite(user_id):
    # import models lazily to avoid circular imports at module import time
    from .models import User
    from .services.invites import invite_link

    user = User.objects.select_related("contact").filter(pk=user_id).first()
    # token may have been consumed (or the user removed) before the worker ran
    if user is None or not user.invite_token or user.contact is None:
        logger.info("Invite for user %s no longer pending, skipping email", user_id)
        return False

    company = settings.ERP_COMPANY_NAME
    portal = "Vendor Portal" if user.role == "vendor" else "Customer Portal"
    body = (
        f"Welcome, {user.contact.name}!\n\n"
        f"You have been invited to the {company} {portal}.\n"
        f"Set up your account here (valid for {settings.ERP_INVITE_TTL_DAYS} days):\n"
        f"{invite_link(user.invite_token)}\n"
    )
    send_mail(
        subject=f"Welcome to {company} - Set Up Your Account",
        message=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
    )
    logger.info("Sent portal invite to %s", user.email)
    return True
