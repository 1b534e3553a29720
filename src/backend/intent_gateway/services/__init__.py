"""
Service-layer helpers: credential bootstrap and the OpenAI-backed handlers.
"""

from .secrets import Credential, CredentialSource, SecretResolver, bootstrap_credential  # noqa: F401
