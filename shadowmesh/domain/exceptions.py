"""
Domain exceptions.

These signal infrastructure or programming faults rather than expected
business outcomes; expected outcomes are returned as Result errors.
"""


class InvalidSecret(ValueError):
    """A TOTP shared secret is not valid RFC 4648 base32"""


class EntropyUnavailable(RuntimeError):
    """The platform's secure random source could not be used"""
