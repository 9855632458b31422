"""Test configuration and fixtures."""

import os

import logfire

# Settings are read from the environment when the container first resolves them
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("NETWORK__DOMAIN", "example.com")
os.environ.setdefault("NETWORK__ROOT_SITE_ID", "1")
os.environ.setdefault("NETWORK__NETWORK_ADMINS", '["admin"]')
os.environ.setdefault("AUTH__JWT_SECRET", "test-jwt-secret")

logfire.configure(send_to_logfire=False, console=False)
