from .password import HASH_LENGTH, SALT_LENGTH, PasswordCredential, check_password, hash_password

__all__ = ["HASH_LENGTH", "SALT_LENGTH", "PasswordCredential", "check_password", "hash_password"]
