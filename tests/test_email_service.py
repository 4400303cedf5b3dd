import smtplib
import unittest
from unittest.mock import patch

from campus_events.errors import EmailDeliveryError
from campus_events.extensions import mail
from campus_events.services.email_service import send_email
from tests.base import BaseTestCase


class TestSendEmail(BaseTestCase):
    def test_sends_html_message(self):
        with mail.record_messages() as outbox:
            send_email('student@example.com', 'Password Reset Request', '<p>Reset</p>')

        self.assertEqual(len(outbox), 1)
        self.assertEqual(outbox[0].recipients, ['student@example.com'])
        self.assertEqual(outbox[0].subject, 'Password Reset Request')
        self.assertEqual(outbox[0].html, '<p>Reset</p>')
        self.assertEqual(outbox[0].sender, 'no-reply@campus.test')

    def test_not_configured(self):
        self.app.config['MAIL_SERVER'] = None
        with mail.record_messages() as outbox:
            with self.assertRaises(EmailDeliveryError):
                send_email('student@example.com', 'Subject', '<p>Body</p>')
        self.assertEqual(outbox, [])

    @patch.object(mail, 'send', side_effect=smtplib.SMTPAuthenticationError(535, b'bad credentials'))
    def test_smtp_failure(self, mock_send):
        with self.assertRaises(EmailDeliveryError) as ctx:
            send_email('student@example.com', 'Subject', '<p>Body</p>')
        self.assertEqual(ctx.exception.message, 'Email could not be sent. Please try again later.')

    @patch.object(mail, 'send', side_effect=ConnectionRefusedError())
    def test_relay_unreachable(self, mock_send):
        with self.assertRaises(EmailDeliveryError):
            send_email('student@example.com', 'Subject', '<p>Body</p>')


if __name__ == '__main__':
    unittest.main()
