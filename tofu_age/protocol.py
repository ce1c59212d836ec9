"""
Requests and responses exchanged with OpenTofu over stdin and stdout.
"""

import json
import typing

import attr

from .utils import ParseError

ENCRYPTION_HEADER = {'magic': 'OpenTofu-External-Encryption-Method', 'version': 1}
KEY_PROVIDER_HEADER = {'magic': 'OpenTofu-External-Key-Provider', 'version': 1}


def dumps(document: typing.Any) -> str:
    return json.dumps(document, separators=(',', ':')) + '\n'


def loads(text: str) -> typing.Any:
    try:
        return json.loads(text)
    except ValueError as error:
        raise ParseError(f"Failed to parse JSON: {error}") from error


@attr.s(frozen=True, kw_only=True)
class EncryptionRequest:
    payload: str = attr.ib()
    key: typing.Optional[str] = attr.ib(default=None)

    @classmethod
    def parse(cls, text: str) -> 'EncryptionRequest':
        document = loads(text)
        if not isinstance(document, dict) or not isinstance(document.get('payload'), str):
            raise ParseError("Request has no payload")
        key = document.get('key')
        if key is not None and not isinstance(key, str):
            raise ParseError("Request key is not a string")
        return cls(payload=document['payload'], key=key)


@attr.s(frozen=True, kw_only=True)
class EncryptionResponse:
    payload: str = attr.ib()

    def dumps(self) -> str:
        return dumps(attr.asdict(self))


@attr.s(frozen=True, kw_only=True)
class KeyProviderRequest:
    external_data: typing.Optional[typing.Mapping[str, str]] = attr.ib(default=None)

    @classmethod
    def parse(cls, text: str) -> 'KeyProviderRequest':
        document = loads(text)
        if document is None:
            return cls()
        if not isinstance(document, dict):
            raise ParseError("Request is not a JSON object")
        return cls(external_data=document.get('external_data'))


@attr.s(frozen=True, kw_only=True)
class KeyProviderResponse:
    encryption_key: str = attr.ib()
    decryption_key: typing.Optional[str] = attr.ib(default=None)
    external_data: typing.Mapping[str, str] = attr.ib(factory=dict)

    def dumps(self) -> str:
        keys = {'encryption_key': self.encryption_key}
        if self.decryption_key is not None:
            keys['decryption_key'] = self.decryption_key
        return dumps({
            'keys': keys,
            'meta': {'external_data': dict(self.external_data)},
        })
