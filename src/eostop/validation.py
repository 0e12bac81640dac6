"""Account name validation."""

import re
from typing import Protocol

_ACCOUNT_NAME = re.compile(r"[a-z1-5.]{0,11}[a-z1-5]")


class InputValidator(Protocol):
    """Decides whether entered text may be sent to the account lookup."""

    def validate(self, text: str) -> bool:
        """Return True if the text is an acceptable account name."""
        ...


class AccountNameValidator:
    """
    Validator for EOS account names.

    A name has 1 to 12 characters from ``a-z``, ``1-5`` and ``.``, and does
    not end with a dot. Surrounding whitespace makes a name invalid.
    """

    def validate(self, text: str) -> bool:
        """Return True if the text is a well-formed account name."""
        if not isinstance(text, str):
            return False
        return _ACCOUNT_NAME.fullmatch(text) is not None
