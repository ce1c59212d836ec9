import logging
import os
import pathlib
import typing

import attr

from .age import Age
from .sources import (
    PRIVATE_KEY_SOURCES,
    RECIPIENT_SOURCES,
    CredentialSource,
    variable_names,
)
from .utils import (
    EmptySource,
    NotFound,
    SourceReadError,
    TofuAgeException,
    comma_separated,
    is_set,
    stripped_lines,
)

log = logging.getLogger(__name__)


def read_text(path: pathlib.Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as error:
        raise SourceReadError(str(error)) from error


@attr.s(frozen=True, kw_only=True)
class KeyPair:
    recipient: str = attr.ib()
    key: str = attr.ib(repr=False)


@attr.s(frozen=True)
class KeyResolver:
    """
    Find age private keys and recipients in the environment.

    Only the first variable that is set is used for each source. A broken
    key file is an error even if a key is also set in another variable.
    """

    environ: typing.Mapping[str, str] = attr.ib(factory=lambda: os.environ)
    age: Age = attr.ib(factory=Age)
    reader: typing.Callable[[pathlib.Path], str] = attr.ib(default=read_text)

    def first_set(self, source: CredentialSource) -> typing.Optional[typing.Tuple[str, str]]:
        for name in source.variables:
            value = self.environ.get(name)
            if is_set(value):
                log.debug(f"Using {source.name} from ${name}")
                return name, typing.cast(str, value)
        return None

    def read(self, path: str) -> str:
        log.debug(f"Reading {path}")
        return self.reader(pathlib.Path(path))

    def derive(self, keys: typing.Sequence[str]) -> typing.List[KeyPair]:
        return [KeyPair(recipient=self.age.recipient(key), key=key) for key in keys]

    def contents(self, source: CredentialSource, value: str) -> str:
        return self.read(value) if source.is_file else value

    def private_keys(self) -> typing.List[KeyPair]:
        for source in PRIVATE_KEY_SOURCES:
            found = self.first_set(source)
            if not found:
                continue

            name, value = found
            keys = stripped_lines(self.contents(source, value))
            if not keys and source.is_file:
                raise EmptySource(
                    f"Private key not present in '{value}' (env var: '{name}')")
            if not keys:
                raise EmptySource(f"Private key not present in env var: '{name}'")
            return self.derive(keys)

        raise NotFound(
            f"Private key not found in any of these environment variables "
            f"(in order): {variable_names(PRIVATE_KEY_SOURCES)}")

    def recipients(self) -> typing.List[str]:
        try:
            pairs = self.private_keys()
        except TofuAgeException as error:
            log.debug(f"No recipients from private keys: {error.message}")
        else:
            if pairs:
                return [pair.recipient for pair in pairs]
            log.debug("No recipients from private keys")

        for source in RECIPIENT_SOURCES:
            found = self.first_set(source)
            if found:
                _, value = found
                return comma_separated(self.contents(source, value))

        raise NotFound(
            f"Recipients not found in any of these environment variables "
            f"(in order): "
            f"{variable_names(PRIVATE_KEY_SOURCES + RECIPIENT_SOURCES)}")
