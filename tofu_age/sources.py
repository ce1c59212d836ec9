"""
Each CredentialSource names the environment variables it is read from.

Variables are listed in priority order and the first one that is set wins.
"""

import enum
import typing


class CredentialSource(enum.Enum):
    KEY_FILE = ('AGE_KEY_FILE', 'SOPS_AGE_KEY_FILE')
    KEY = ('AGE_KEY', 'SOPS_AGE_KEY')
    RECIPIENTS_FILE = ('AGE_RECIPIENTS_FILE', 'SOPS_AGE_RECIPIENTS_FILE')
    RECIPIENTS = ('AGE_RECIPIENTS', 'SOPS_AGE_RECIPIENTS')

    @property
    def variables(self) -> typing.Tuple[str, ...]:
        return self.value

    @property
    def is_file(self) -> bool:
        return self in (CredentialSource.KEY_FILE, CredentialSource.RECIPIENTS_FILE)


PRIVATE_KEY_SOURCES = (CredentialSource.KEY_FILE, CredentialSource.KEY)
RECIPIENT_SOURCES = (CredentialSource.RECIPIENTS_FILE, CredentialSource.RECIPIENTS)


def variable_names(sources: typing.Iterable[CredentialSource]) -> str:
    """Format the variables of some sources for an error message."""
    return ','.join(
        f"'{name}'" for source in sources for name in source.variables)
