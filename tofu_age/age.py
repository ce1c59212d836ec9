import logging
import typing

import attr
import pyrage
import pyrage.ssh
import pyrage.x25519

from .utils import CryptoError, DerivationFailed

log = logging.getLogger(__name__)


@attr.s(frozen=True)
class Age:
    def identity(self, key: str) -> pyrage.x25519.Identity:
        return pyrage.x25519.Identity.from_str(key)

    def parse_recipient(self, recipient: str):
        if recipient.startswith('ssh-'):
            return pyrage.ssh.Recipient.from_str(recipient)
        return pyrage.x25519.Recipient.from_str(recipient)

    def recipient(self, key: str) -> str:
        """Derive the public recipient of a private key."""
        try:
            return str(self.identity(key).to_public())
        except (pyrage.IdentityError, ValueError) as error:
            log.debug(f"Could not parse private key: {error}")
            raise DerivationFailed(
                "Failed to extract recipient from private key.") from error

    def encrypt(self, plaintext: bytes, recipients: typing.Iterable[str]) -> bytes:
        recipients = list(recipients)
        log.debug(f"Encrypting {len(plaintext)} bytes for {len(recipients)} recipients")
        try:
            return pyrage.encrypt(
                plaintext, [self.parse_recipient(r) for r in recipients])
        except (pyrage.RecipientError, pyrage.EncryptError, ValueError) as error:
            log.error(f"Failed to encrypt data: {error}")
            raise CryptoError(f"Failed to encrypt data: {error}") from error

    def decrypt(self, ciphertext: bytes, keys: typing.Iterable[str]) -> bytes:
        keys = list(keys)
        log.debug(f"Decrypting {len(ciphertext)} bytes with {len(keys)} private keys")
        try:
            return pyrage.decrypt(ciphertext, [self.identity(k) for k in keys])
        except (pyrage.IdentityError, pyrage.DecryptError, ValueError) as error:
            log.error(f"Failed to decrypt data: {error}")
            raise CryptoError(f"Failed to decrypt data: {error}") from error
