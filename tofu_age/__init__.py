"""
tofu-age encrypts OpenTofu state with age keys found in the environment.

It is run by OpenTofu as an external key provider or an external encryption
method. A header line is written to stdout, a JSON request is read from stdin
and a JSON response is written to stdout.

Configure private keys (recipients are derived from them):

\b
    $ export AGE_KEY_FILE="$HOME/.config/age/keys.txt"
    $ export AGE_KEY="AGE-SECRET-KEY-1..."

Or configure recipients only (encryption without decryption):

\b
    $ export AGE_RECIPIENTS_FILE="recipients.txt"
    $ export AGE_RECIPIENTS="age1...,age1..."

The SOPS_ prefixed variants of each variable are read when the unprefixed
variable is unset. Set DEBUG=1 to also write logs to ./tofu-age-debug.log.
"""

__version__ = '1.0.0'
