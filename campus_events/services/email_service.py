"""
Email Service
Sends HTML email through the configured SMTP relay with Flask-Mail.
"""

import logging
import smtplib

from flask import current_app
from flask_mail import Message

from campus_events.errors import EmailDeliveryError
from campus_events.extensions import mail

logger = logging.getLogger(__name__)


def send_email(to_email, subject, html_content):
    if not current_app.config.get('MAIL_SERVER'):
        raise EmailDeliveryError()

    message = Message(subject, recipients=[to_email], html=html_content)
    try:
        mail.send(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        raise EmailDeliveryError() from e

    logger.info("Sent email to %s: %s", to_email, subject)
