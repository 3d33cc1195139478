from .credential import CredentialRepository

__all__ = ["CredentialRepository"]
