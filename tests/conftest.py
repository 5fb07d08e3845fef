"""
Point the application at an in-memory database and a non-development
environment before any project module reads settings.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["NOTIFICATION_URL"] = "http://notify.test/api/send-admin-notification"
for _name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASSWORD"):
    os.environ.pop(_name, None)
