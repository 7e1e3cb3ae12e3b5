"""Flask configuration."""

import os
import secrets

VERSION = '0.1.0'

#################### General config for app ####################
BASE_SERVER = os.environ.get('BASE_SERVER', 'localhost:8086')
"""Host used to build links sent by email."""

SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))

LOGFILE = os.environ.get('LOGFILE')
LOGLEVEL = int(os.environ.get('LOGLEVEL', '20'))

#################### Database ####################
SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI',
                                         'sqlite:///chronicle.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

DB_POOL_SIZE = int(os.environ.get('DB_POOL_SIZE', '10'))
"""Number of connections kept in the pool shared by all request threads."""

DB_MAX_OVERFLOW = int(os.environ.get('DB_MAX_OVERFLOW', '0'))
DB_POOL_TIMEOUT = int(os.environ.get('DB_POOL_TIMEOUT', '30'))
"""Seconds a request waits for a pooled connection before failing."""

CREATE_DB = bool(int(os.environ.get('CREATE_DB', '0')))
"""Create missing tables when the application starts."""

#################### Sessions ####################
JWT_SECRET = os.environ.get('JWT_SECRET', secrets.token_urlsafe(32))
"""Secret used to sign session cookies."""

SESSION_DURATION = int(os.environ.get('SESSION_DURATION', '86400'))
"""Lifetime of a login session, in seconds."""

INVITATION_DURATION = int(os.environ.get('INVITATION_DURATION', '86400'))
"""Lifetime of invitations and password reset requests, in seconds."""

AUTH_SESSION_COOKIE_NAME = os.environ.get('AUTH_SESSION_COOKIE_NAME',
                                          'chronicle_session')
AUTH_SESSION_COOKIE_DOMAIN = os.environ.get('AUTH_SESSION_COOKIE_DOMAIN')
AUTH_SESSION_COOKIE_SECURE = bool(int(
    os.environ.get('AUTH_SESSION_COOKIE_SECURE', '1')
))

#################### Mail ####################
MAIL_SERVER = os.environ.get('MAIL_SERVER')
"""SMTP host. When unset, outgoing mail is logged instead of sent."""

MAIL_PORT = int(os.environ.get('MAIL_PORT', '25'))
MAIL_SENDER = os.environ.get('MAIL_SENDER', 'noreply@localhost')
