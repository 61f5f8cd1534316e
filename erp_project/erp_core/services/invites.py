import datetime
import logging
import secrets

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .audit_helper import log_action

logger = logging.getLogger(__name__)


def invite_link(token: str) -> str:
    return f"{settings.PORTAL_BASE_URL.rstrip('/')}/portal/setup-account/?token={token}"


def invite_contact(contact, user=None):
    """
    Give a contact portal access.
    - links (or creates) a User with role vendor/customer from the contact type
    - issues a fresh invite token valid ERP_INVITE_TTL_DAYS days
    - queues the invitation email once the transaction commits
    Re-inviting a contact whose account is not yet set up just renews the token.
    """
    # lazy import: tasks imports services
    from ..tasks import send_contact_invite

    User = get_user_model()
    if not contact.email:
        raise ValidationError(f"{contact} has no email address.")
    role = "vendor" if contact.contact_type == "vendor" else "customer"

    with transaction.atomic():
        account = User.objects.filter(contact=contact).first()
        if account is None:
            # an existing login with the same email gets linked instead of duplicated
            account = User.objects.filter(email__iexact=contact.email, contact__isnull=True).first()
        if account is not None and account.has_usable_password():
            raise ValidationError(f"{contact} already has an account set up.")

        if account is None:
            account = User.objects.create_user(
                username=contact.email.lower(),
                email=contact.email,
                password=None,  # unusable until the invite is accepted
                first_name=contact.name[:150],
                role=role,
                contact=contact,
            )
        account.contact = contact
        account.role = role
        account.invite_token = secrets.token_urlsafe(32)
        account.invite_expires = timezone.now() + datetime.timedelta(
            days=settings.ERP_INVITE_TTL_DAYS)
        account.save()

        log_action(action="invite", instance=contact, user=user,
                   changes={"user_id": account.pk, "email": contact.email})
        # email delivery never blocks the request
        transaction.on_commit(lambda: send_contact_invite.delay(account.pk))

    logger.info("Invited %s (%s) as %s", contact, contact.email, role)
    return account


def get_invited_user(token: str):
    """Return the user owning a valid, unexpired token or raise ValidationError."""
    User = get_user_model()
    account = User.objects.filter(
        invite_token=token, invite_expires__gt=timezone.now()).first() if token else None
    if account is None:
        raise ValidationError("Invalid or expired invitation link.")
    return account


def accept_invite(token: str, password: str):
    """Set the invited user's password and consume the token."""
    with transaction.atomic():
        account = get_invited_user(token)
        if account.has_usable_password():
            raise ValidationError("This account has already been set up.")
        validate_password(password, account)
        account.set_password(password)
        account.invite_token = None
        account.invite_expires = None
        account.is_active = True
        account.save()
    logger.info("User %s accepted portal invite", account.pk)
    return account
