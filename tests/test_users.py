import unittest
from unittest.mock import patch

from campus_events.extensions import db
from campus_events.models import User
from campus_events.models.user import DEFAULT_AVATAR
from tests.base import BaseTestCase, PASSWORD


class TestSignup(BaseTestCase):
    def signup(self, **body):
        payload = {'name': 'Asha', 'email': 'asha@example.com', 'password': PASSWORD}
        payload.update(body)
        return self.client.post('/api/users', json=payload)

    def test_defaults_to_student(self):
        resp = self.signup()
        self.assertEqual(resp.status_code, 201)
        data = resp.get_json()
        self.assertEqual(data['role'], 'student')
        self.assertEqual(data['profilePicture'], DEFAULT_AVATAR)
        self.assertIn('token', data)
        self.assertNotIn('password', data)

        user = User.query.filter_by(email='asha@example.com').first()
        self.assertNotEqual(user.password_hash, PASSWORD)
        self.assertTrue(user.check_password(PASSWORD))

    def test_duplicate_email(self):
        self.signup()
        resp = self.signup(name='Another')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['message'], 'User already exists')

    def test_admin_signup_rejected(self):
        resp = self.signup(role='admin')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['message'], 'Direct admin registration is not allowed')
        self.assertEqual(User.query.count(), 0)

    def test_validation(self):
        self.assertEqual(self.signup(email='not-an-email').status_code, 400)
        self.assertEqual(self.signup(password='short').status_code, 400)
        self.assertEqual(self.signup(role='superuser').status_code, 400)
        self.assertEqual(self.signup(gender='Robot').status_code, 400)
        self.assertEqual(self.client.post('/api/users', json={}).status_code, 400)

    def test_body_must_be_object(self):
        for body in (['x'], 'asha', 42):
            resp = self.client.post('/api/users', json=body)
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.get_json()['message'], 'Request body must be a JSON object')
        self.assertEqual(User.query.count(), 0)

    def test_role_conditional_fields(self):
        student = self.signup(gender='Female', rollNo='CS-001', department='CS', societyName='Drama').get_json()
        self.assertEqual(student['rollNo'], 'CS-001')
        self.assertIsNone(student['societyName'])

        organizer = self.signup(email='org@example.com', role='organizer', rollNo='CS-002',
                                societyName='Robotics Club').get_json()
        self.assertEqual(organizer['societyName'], 'Robotics Club')

    def test_duplicate_roll_number(self):
        self.signup(rollNo='CS-001')
        resp = self.signup(email='other@example.com', rollNo='CS-001')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['message'], 'Roll number already in use')

    @patch('campus_events.services.user_service.upload_image', return_value='https://cdn.test/me.png')
    def test_profile_picture_uploaded(self, mock_upload):
        resp = self.signup(profilePicture='data:image/png;base64,AAAA')
        self.assertEqual(resp.get_json()['profilePicture'], 'https://cdn.test/me.png')
        mock_upload.assert_called_once_with('data:image/png;base64,AAAA', 'profile_pictures')


class TestLogin(BaseTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user(email='lee@example.com')

    def test_login_success(self):
        resp = self.client.post('/api/users/login', json={'email': 'lee@example.com', 'password': PASSWORD})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data['id'], str(self.user.user_id))
        self.assertIn('token', data)
        self.assertIn('refreshToken', data)

        profile = self.client.get('/api/users/profile', headers={'Authorization': f"Bearer {data['token']}"})
        self.assertEqual(profile.get_json()['email'], 'lee@example.com')

    def test_wrong_password(self):
        resp = self.client.post('/api/users/login', json={'email': 'lee@example.com', 'password': 'wrong-pass'})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()['message'], 'Invalid email or password')

    def test_unknown_email(self):
        resp = self.client.post('/api/users/login', json={'email': 'nobody@example.com', 'password': PASSWORD})
        self.assertEqual(resp.status_code, 401)

    def test_refresh(self):
        tokens = self.client.post('/api/users/login', json={'email': 'lee@example.com', 'password': PASSWORD}).get_json()
        resp = self.client.post('/api/users/refresh', headers={'Authorization': f"Bearer {tokens['refreshToken']}"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn('token', resp.get_json())

    def test_logout_revokes_token(self):
        headers = self.headers(self.user)
        self.assertEqual(self.client.post('/api/users/logout', headers=headers).status_code, 200)
        resp = self.client.get('/api/users/profile', headers=headers)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()['message'], 'Not authorized, token revoked')

    def test_token_of_deleted_user(self):
        headers = self.headers(self.user)
        db.session.delete(self.user)
        db.session.commit()
        resp = self.client.get('/api/users/profile', headers=headers)
        self.assertEqual(resp.status_code, 401)


class TestProfile(BaseTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user(role='student', name='Old Name', profile_picture='https://cdn.test/a.png')

    def test_update_profile(self):
        resp = self.client.put('/api/users/profile', json={
            'name': 'New Name',
            'department': 'Physics',
            'role': 'admin',
        }, headers=self.headers(self.user))
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data['name'], 'New Name')
        self.assertEqual(data['department'], 'Physics')
        self.assertEqual(data['role'], 'student')
        self.assertEqual(data['profilePicture'], 'https://cdn.test/a.png')
        self.assertIn('token', data)

    def test_fields_outside_role_ignored(self):
        resp = self.client.put('/api/users/profile', json={
            'societyName': 'Drama Society',
            'rollNo': 'PH-007',
        }, headers=self.headers(self.user))
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.get_json()['societyName'])
        self.assertEqual(resp.get_json()['rollNo'], 'PH-007')

        admin = self.create_user(role='admin')
        resp = self.client.put('/api/users/profile', json={
            'department': 'Physics',
            'gender': 'Female',
        }, headers=self.headers(admin))
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.get_json()['department'])
        self.assertIsNone(resp.get_json()['gender'])

    def test_organizer_sets_society(self):
        organizer = self.create_user(role='organizer')
        resp = self.client.put('/api/users/profile', json={'societyName': 'Robotics Club'},
                               headers=self.headers(organizer))
        self.assertEqual(resp.get_json()['societyName'], 'Robotics Club')

    def test_empty_picture_resets_default(self):
        resp = self.client.put('/api/users/profile', json={'profilePicture': ''}, headers=self.headers(self.user))
        self.assertEqual(resp.get_json()['profilePicture'], DEFAULT_AVATAR)

    def test_change_password(self):
        self.client.put('/api/users/profile', json={'password': 'brand-new-pass'}, headers=self.headers(self.user))
        db.session.refresh(self.user)
        self.assertTrue(self.user.check_password('brand-new-pass'))


class TestAdminUserManagement(BaseTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.create_user(role='admin')
        self.student = self.create_user(role='student', name='Stu')

    def test_list_users_admin_only(self):
        resp = self.client.get('/api/users', headers=self.headers(self.student))
        self.assertEqual(resp.status_code, 401)

        resp = self.client.get('/api/users', headers=self.headers(self.admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.get_json()), 2)
        self.assertTrue(all('password' not in u and 'passwordHash' not in u for u in resp.get_json()))

    def test_admin_changes_role(self):
        resp = self.client.put(
            f"/api/users/{self.student.user_id}",
            json={'role': 'organizer', 'societyName': 'Chess Club'},
            headers=self.headers(self.admin)
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['role'], 'organizer')
        self.assertEqual(resp.get_json()['name'], 'Stu')
        self.assertEqual(resp.get_json()['societyName'], 'Chess Club')

    def test_cannot_delete_admin(self):
        other_admin = self.create_user(role='admin')
        resp = self.client.delete(f"/api/users/{other_admin.user_id}", headers=self.headers(self.admin))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['message'], 'Cannot delete admin user')

    def test_delete_student(self):
        resp = self.client.delete(f"/api/users/{self.student.user_id}", headers=self.headers(self.admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['message'], 'User removed')

    def test_unknown_user(self):
        resp = self.client.delete(
            '/api/users/00000000-0000-0000-0000-000000000000',
            headers=self.headers(self.admin)
        )
        self.assertEqual(resp.status_code, 404)


if __name__ == '__main__':
    unittest.main()
