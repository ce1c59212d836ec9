import base64
import binascii
import typing

import click


class TofuAgeException(click.ClickException):
    pass


class ParseError(TofuAgeException):
    """The request could not be parsed."""


class NotFound(TofuAgeException):
    """No credential source is configured."""


class EmptySource(TofuAgeException):
    """A configured credential source contained nothing usable."""


class DerivationFailed(TofuAgeException):
    """A recipient could not be derived from a private key."""


class SourceReadError(TofuAgeException):
    """A key or recipients file could not be read."""


class CryptoError(TofuAgeException):
    """Encryption, decryption or decoding failed."""


def remove_hash_comments(text: str) -> str:
    """Remove lines that start with '#' once leading whitespace is ignored."""
    return '\n'.join(
        line for line in text.split('\n')
        if not line.strip().startswith('#'))


def stripped_lines(text: str) -> typing.List[str]:
    """Split text into stripped lines, without comments and without blanks."""
    lines = (line.strip() for line in remove_hash_comments(text).split('\n'))
    return [line for line in lines if line]


def comma_separated(text: str) -> typing.List[str]:
    """
    Split text into stripped lines and each line on commas.

    Empty entries are kept, so 'a,\n\nb' gives ['a', '', '', 'b'].
    """
    return [
        entry
        for line in remove_hash_comments(text).split('\n')
        for entry in line.strip().split(',')]


def is_set(value: typing.Optional[str]) -> bool:
    return bool(value and value.strip())


def b64encode(data: typing.Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode('utf-8')
    return base64.b64encode(data).decode('ascii')


def b64decode(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as error:
        raise CryptoError(f"Invalid base64 data: {error}") from error


def b64decode_list(data: str) -> typing.List[str]:
    """Decode a base64 comma separated list, dropping empty entries."""
    try:
        text = b64decode(data).decode('utf-8')
    except UnicodeDecodeError as error:
        raise CryptoError(f"Invalid UTF-8 data: {error}") from error
    return [entry for entry in text.split(',') if entry]
