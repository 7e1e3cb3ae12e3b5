"""Tests for :mod:`chronicle.services.users`."""

from unittest import TestCase

from .. import users, sessions, characters, articles, tags
from ..exceptions import NoSuchUser, RegistrationFailed, UserExists, \
    AuthenticationFailed
from ..models import DBSession, DBCharacter, DBArticle, DBContentTag, DBUser
from ..passwords import hash_password
from .util import temporary_db


class TestCreateUser(TestCase):
    """Create users directly."""

    def test_create(self):
        """A new user can authenticate with their password."""
        with temporary_db():
            user = users.create_user('the@user.com', 'theuser', 'foopass')
            self.assertFalse(user.isadmin)
            self.assertIsNotNone(user.created_at)
            self.assertTrue(users.email_exists('the@user.com'))
            self.assertTrue(users.username_exists('theuser'))
            self.assertFalse(users.email_exists('other@user.com'))

            authenticated = users.authenticate('the@user.com', 'foopass')
            self.assertEqual(authenticated.user_id, user.user_id)

    def test_create_with_hash(self):
        """A pre-hashed password may be used instead."""
        with temporary_db():
            users.create_user('the@user.com', 'theuser',
                              password_hash=hash_password('foopass'))
            users.authenticate('the@user.com', 'foopass')

    def test_no_password(self):
        with temporary_db():
            with self.assertRaises(RegistrationFailed):
                users.create_user('the@user.com', 'theuser')

    def test_duplicate_email(self):
        """Email addresses are unique."""
        with temporary_db() as db_session:
            users.create_user('the@user.com', 'theuser', 'foopass')
            with self.assertRaises(RegistrationFailed):
                users.create_user('the@user.com', 'other', 'foopass')
            self.assertEqual(db_session.query(DBUser).count(), 1)


class TestAuthenticate(TestCase):
    """Check credentials."""

    def test_wrong_password(self):
        with temporary_db():
            users.create_user('the@user.com', 'theuser', 'foopass')
            with self.assertRaises(AuthenticationFailed):
                users.authenticate('the@user.com', 'notfoopass')

    def test_unknown_email(self):
        with temporary_db():
            with self.assertRaises(NoSuchUser):
                users.authenticate('nobody@user.com', 'foopass')


class TestUpdateUser(TestCase):
    """Update user profiles."""

    def test_update(self):
        """Only the given fields change."""
        with temporary_db():
            user = users.create_user('the@user.com', 'theuser', 'foopass')
            updated = users.update_user(user.user_id, username='newname')
            self.assertEqual(updated.username, 'newname')
            self.assertEqual(updated.email, 'the@user.com')
            self.assertFalse(updated.isadmin)

            updated = users.update_user(user.user_id, isadmin=True)
            self.assertTrue(updated.isadmin)

    def test_update_to_taken_username(self):
        with temporary_db():
            users.create_user('one@user.com', 'one', 'foopass')
            two = users.create_user('two@user.com', 'two', 'foopass')
            with self.assertRaises(UserExists):
                users.update_user(two.user_id, username='one')

    def test_update_nonexistant(self):
        with temporary_db():
            with self.assertRaises(NoSuchUser):
                users.update_user('nope', username='newname')

    def test_set_password(self):
        with temporary_db():
            users.create_user('the@user.com', 'theuser', 'foopass')
            users.set_password('the@user.com', 'newpass')
            users.authenticate('the@user.com', 'newpass')
            with self.assertRaises(AuthenticationFailed):
                users.authenticate('the@user.com', 'foopass')


class TestDeleteUser(TestCase):
    """Deleting a user removes everything they own."""

    def test_delete(self):
        with temporary_db() as db_session:
            user = users.create_user('the@user.com', 'theuser', 'foopass')
            other = users.create_user('other@user.com', 'other', 'foopass')
            sessions.create_session(user.user_id, user.email)
            character = characters.create_character(
                user.user_id, 'Bilbo', 'A hobbit', user.email
            )
            article = articles.create_article(
                user.user_id, character.character_id, 'There', 'and',
                'back again', user.email
            )
            tag = tags.create_tag('travel', user.email)
            tags.add_content_tag(article.article_id, tag.tag_id, user.email)
            characters.create_character(other.user_id, 'Smaug', '',
                                        other.email)

            users.delete_user(user.user_id)

            with self.assertRaises(NoSuchUser):
                users.get_user(user.user_id)
            self.assertEqual(db_session.query(DBSession).count(), 0)
            self.assertEqual(db_session.query(DBArticle).count(), 0)
            self.assertEqual(db_session.query(DBContentTag).count(), 0)
            self.assertEqual(db_session.query(DBCharacter).count(), 1,
                             'Characters of other users are untouched')
            self.assertEqual(len(tags.list_tags()), 1, 'Tags are global')

    def test_delete_nonexistant(self):
        with temporary_db():
            with self.assertRaises(NoSuchUser):
                users.delete_user('nope')


class TestQueryAll(TestCase):
    def test_query_all(self):
        with temporary_db():
            self.assertEqual(users.query_all(), [])
            users.create_user('b@user.com', 'bee', 'foopass')
            users.create_user('a@user.com', 'ay', 'foopass')
            self.assertEqual([u.username for u in users.query_all()],
                             ['ay', 'bee'])
