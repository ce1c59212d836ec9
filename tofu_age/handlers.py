"""
Handlers for each of the commands OpenTofu runs.

Each handler writes the protocol header, reads a request from stdin and writes
a single response to stdout. When any step fails the error is logged and
raised, and nothing but the header is written.
"""

import contextlib
import logging
import typing

from .age import Age
from .keys import KeyResolver
from .protocol import (
    ENCRYPTION_HEADER,
    KEY_PROVIDER_HEADER,
    EncryptionRequest,
    EncryptionResponse,
    KeyProviderRequest,
    KeyProviderResponse,
    dumps,
)
from .utils import (
    CryptoError,
    NotFound,
    ParseError,
    TofuAgeException,
    b64decode,
    b64decode_list,
    b64encode,
)

log = logging.getLogger(__name__)


@contextlib.contextmanager
def failures(action: str) -> typing.Iterator[None]:
    try:
        yield
    except TofuAgeException as error:
        log.error(f"{action}: {error.message}")
        raise


def write_header(stdout: typing.TextIO, header: typing.Mapping[str, typing.Any]) -> None:
    stdout.write(dumps(header))
    stdout.flush()


def encrypt(
        stdin: typing.TextIO,
        stdout: typing.TextIO,
        resolver: KeyResolver,
        age: Age) -> None:
    write_header(stdout, ENCRYPTION_HEADER)
    raw = stdin.read()
    log.debug(f"Encrypt input: {raw}")

    with failures("Failed to parse encrypt input"):
        request = EncryptionRequest.parse(raw)

    with failures("Failed to get age recipients"):
        if request.key:
            recipients = b64decode_list(request.key)
        else:
            recipients = [r for r in resolver.recipients() if r.strip()]
        if not recipients:
            raise NotFound("recipients not found")

    with failures("Encryption failed"):
        try:
            plaintext = request.payload.encode('utf-8')
        except UnicodeEncodeError as error:
            raise ParseError(f"Payload is not valid UTF-8: {error}") from error
        ciphertext = age.encrypt(plaintext, recipients)

    response = EncryptionResponse(payload=b64encode(ciphertext))
    log.debug(f"Encrypt output: {response}")
    stdout.write(response.dumps())


def decrypt(
        stdin: typing.TextIO,
        stdout: typing.TextIO,
        age: Age) -> None:
    write_header(stdout, ENCRYPTION_HEADER)
    raw = stdin.read()
    log.debug("Decrypt input")

    with failures("Failed to parse decrypt input"):
        request = EncryptionRequest.parse(raw)
        if not request.key:
            raise ParseError("Request has no key")

    with failures("Failed to read private keys"):
        keys = b64decode_list(request.key)
        if not keys:
            raise NotFound("Private keys not sent.")

    with failures("Decryption failed"):
        plaintext = age.decrypt(b64decode(request.payload), keys)
        try:
            text = plaintext.decode('utf-8')
        except UnicodeDecodeError as error:
            raise CryptoError(f"Decrypted payload is not UTF-8: {error}") from error

    stdout.write(EncryptionResponse(payload=text).dumps())
    log.debug("Decrypt output written")


def key_provider(
        stdin: typing.TextIO,
        stdout: typing.TextIO,
        resolver: KeyResolver) -> None:
    write_header(stdout, KEY_PROVIDER_HEADER)
    raw = stdin.read()
    log.debug(f"Key provider input: {raw}")

    with failures("Failed to parse key provider input"):
        request = KeyProviderRequest.parse(raw)

    with failures("Failed to get age private keys"):
        pairs = resolver.private_keys()

    with failures("Failed to get age recipients"):
        recipients = resolver.recipients()

    decryption_key = None
    if request.external_data:
        decryption_key = b64encode(','.join(pair.key for pair in pairs))

    response = KeyProviderResponse(
        encryption_key=b64encode(','.join(recipients)),
        decryption_key=decryption_key,
        external_data={
            f'recipient-{index}': recipient
            for index, recipient in enumerate(recipients)})
    log.debug(f"Key provider output: {response.external_data}")
    stdout.write(response.dumps())
