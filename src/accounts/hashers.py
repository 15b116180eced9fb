"""PIN hashing.

PINs are short, so their hash cost is tuned separately from Django's default
password hasher through ``settings.PIN_HASH_ITERATIONS``.
"""
from django.conf import settings
from django.contrib.auth.hashers import PBKDF2PasswordHasher


class PinPBKDF2PasswordHasher(PBKDF2PasswordHasher):
    algorithm = "pin_pbkdf2_sha256"

    @property
    def iterations(self):
        return getattr(settings, "PIN_HASH_ITERATIONS", PBKDF2PasswordHasher.iterations)
