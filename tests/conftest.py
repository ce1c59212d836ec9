import json
import logging
import signal
import typing

import attr
import click.testing
import pyrage.x25519
import pytest

import tofu_age.cli
from tofu_age.keys import KeyResolver
from tofu_age.utils import DerivationFailed, SourceReadError

VARIABLES = (
    'AGE_KEY_FILE',
    'SOPS_AGE_KEY_FILE',
    'AGE_KEY',
    'SOPS_AGE_KEY',
    'AGE_RECIPIENTS_FILE',
    'SOPS_AGE_RECIPIENTS_FILE',
    'AGE_RECIPIENTS',
    'SOPS_AGE_RECIPIENTS',
    'DEBUG',
    'LOG_LEVEL',
)


@pytest.fixture(autouse=True)
def environ(monkeypatch):
    for name in VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_logging():
    handlers = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)}
    yield
    logger = logging.getLogger('tofu_age')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    for signum, handler in handlers.items():
        signal.signal(signum, handler)


@attr.s(frozen=True)
class Output:
    """The header and response lines a command wrote to stdout."""

    result: click.testing.Result = attr.ib()

    @property
    def lines(self) -> typing.List[str]:
        return self.result.stdout.splitlines()

    @property
    def header(self):
        return json.loads(self.lines[0]) if self.lines else None

    @property
    def body(self):
        return json.loads(self.lines[1]) if len(self.lines) > 1 else None


@pytest.fixture()
def invoke():
    def invoke_func(
            arguments: typing.Sequence[str],
            request: typing.Any = None,
            exit_code: int = 0) -> Output:
        assert all(isinstance(arg, str) for arg in arguments)
        runner = click.testing.CliRunner()
        result = runner.invoke(
            tofu_age.cli.main,
            arguments,
            input=request if isinstance(request, str) else json.dumps(request))
        if result.exit_code != exit_code:
            message = f"Command tofu-age {' '.join(arguments)} exited with {result.exit_code}"
            raise Exception(message) from result.exception
        return Output(result)

    return invoke_func


@pytest.fixture()
def identity() -> pyrage.x25519.Identity:
    return pyrage.x25519.Identity.generate()


@pytest.fixture()
def other_identity() -> pyrage.x25519.Identity:
    return pyrage.x25519.Identity.generate()


@attr.s
class FakeAge:
    """Derives recipients from a lookup table, or the same one for every key."""

    recipients: typing.Union[str, typing.Mapping[str, str]] = attr.ib(default='recipient')
    derived: typing.List[str] = attr.ib(factory=list)

    def recipient(self, key: str) -> str:
        self.derived.append(key)
        if isinstance(self.recipients, str):
            return self.recipients
        if key not in self.recipients:
            raise DerivationFailed("Failed to extract recipient from private key.")
        return self.recipients[key]


@attr.s
class FakeReader:
    files: typing.Mapping[str, str] = attr.ib(factory=dict)
    read: typing.List[str] = attr.ib(factory=list)

    def __call__(self, path) -> str:
        self.read.append(path.as_posix())
        if path.as_posix() not in self.files:
            raise SourceReadError("File not found")
        return self.files[path.as_posix()]


@pytest.fixture()
def fake_age() -> FakeAge:
    return FakeAge()


@pytest.fixture()
def reader() -> FakeReader:
    return FakeReader()


@pytest.fixture()
def resolver(fake_age, reader):
    def resolver_func(**environ: str) -> KeyResolver:
        return KeyResolver(environ, fake_age, reader)

    return resolver_func
