import hashlib
import re
import smtplib
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from campus_events.errors import EmailDeliveryError
from campus_events.extensions import db, mail
from tests.base import BaseTestCase


def token_from_email(mock_send):
    html = mock_send.call_args[0][2]
    return re.search(r'/resetpassword/([0-9a-f]+)', html).group(1)


class TestPasswordReset(BaseTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user(email='forgetful@example.com')

    @patch('campus_events.services.user_service.send_email')
    def test_forgot_password_stores_hashed_token(self, mock_send):
        resp = self.client.post('/api/users/forgotpassword', json={'email': 'forgetful@example.com'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {'success': True, 'data': 'Email Sent'})

        to_email, subject, html = mock_send.call_args[0]
        self.assertEqual(to_email, 'forgetful@example.com')
        self.assertEqual(subject, 'Password Reset Request')
        self.assertIn('http://frontend.test/resetpassword/', html)

        token = token_from_email(mock_send)
        db.session.refresh(self.user)
        self.assertEqual(self.user.reset_password_token, hashlib.sha256(token.encode()).hexdigest())
        self.assertIsNotNone(self.user.reset_password_expire)

    def test_reset_email_goes_through_mailer(self):
        with mail.record_messages() as outbox:
            resp = self.client.post('/api/users/forgotpassword', json={'email': 'forgetful@example.com'})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(outbox), 1)
        self.assertEqual(outbox[0].recipients, ['forgetful@example.com'])
        self.assertIn('http://frontend.test/resetpassword/', outbox[0].html)

    @patch.object(mail, 'send', side_effect=smtplib.SMTPServerDisconnected('gone'))
    def test_mailer_failure_clears_token(self, mock_mail_send):
        resp = self.client.post('/api/users/forgotpassword', json={'email': 'forgetful@example.com'})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()['message'], 'Email could not be sent. Please try again later.')

        db.session.refresh(self.user)
        self.assertIsNone(self.user.reset_password_token)

    def test_unknown_email(self):
        resp = self.client.post('/api/users/forgotpassword', json={'email': 'nobody@example.com'})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()['message'], 'User with that email does not exist')

    @patch('campus_events.services.user_service.send_email', side_effect=EmailDeliveryError())
    def test_email_failure_clears_token(self, mock_send):
        resp = self.client.post('/api/users/forgotpassword', json={'email': 'forgetful@example.com'})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()['message'], 'Email could not be sent. Please try again later.')

        db.session.refresh(self.user)
        self.assertIsNone(self.user.reset_password_token)
        self.assertIsNone(self.user.reset_password_expire)

    @patch('campus_events.services.user_service.send_email')
    def test_reset_password(self, mock_send):
        self.client.post('/api/users/forgotpassword', json={'email': 'forgetful@example.com'})
        token = token_from_email(mock_send)

        resp = self.client.put(f"/api/users/resetpassword/{token}", json={
            'password': 'a-new-password',
            'confirmPassword': 'a-new-password',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['data'], 'Password reset successful')

        db.session.refresh(self.user)
        self.assertTrue(self.user.check_password('a-new-password'))
        self.assertIsNone(self.user.reset_password_token)

        # Single use
        resp = self.client.put(f"/api/users/resetpassword/{token}", json={
            'password': 'another-password',
            'confirmPassword': 'another-password',
        })
        self.assertEqual(resp.status_code, 400)

    @patch('campus_events.services.user_service.send_email')
    def test_password_mismatch(self, mock_send):
        self.client.post('/api/users/forgotpassword', json={'email': 'forgetful@example.com'})
        token = token_from_email(mock_send)

        resp = self.client.put(f"/api/users/resetpassword/{token}", json={
            'password': 'a-new-password',
            'confirmPassword': 'something-else',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['message'], 'Passwords do not match')

    @patch('campus_events.services.user_service.send_email')
    def test_expired_token(self, mock_send):
        self.client.post('/api/users/forgotpassword', json={'email': 'forgetful@example.com'})
        token = token_from_email(mock_send)

        db.session.refresh(self.user)
        self.user.reset_password_expire = datetime.now(timezone.utc) - timedelta(minutes=1)
        db.session.commit()

        resp = self.client.put(f"/api/users/resetpassword/{token}", json={
            'password': 'a-new-password',
            'confirmPassword': 'a-new-password',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['message'], 'Invalid or expired reset token')


if __name__ == '__main__':
    unittest.main()
