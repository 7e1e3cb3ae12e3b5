"""Storage services, backed by Flask-SQLAlchemy."""
