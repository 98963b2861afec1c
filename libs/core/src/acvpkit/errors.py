from __future__ import annotations
from typing import Optional

"""Error kinds raised while parsing and executing test vectors.

Execution never lets these escape a single case: the dispatcher converts
them into failure outcomes keyed by the class name (see ``kind``).
"""


class AcvpError(Exception):
    """Base class for every harness error."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class SchemaError(AcvpError):
    """Malformed prompt content: missing field, bad hex, unknown enum tag."""

    def __init__(self, message: str, record: Optional[str] = None, field: Optional[str] = None) -> None:
        self.record = record
        self.field = field
        prefix = ""
        if record and field:
            prefix = f"{record}.{field}: "
        elif record:
            prefix = f"{record}: "
        super().__init__(prefix + message)


class ExpansionError(AcvpError):
    """Large-message length arithmetic does not add up."""


class Mismatch(AcvpError):
    """Computed digest differs from the expected one (sample mode)."""

    def __init__(self, expected: Optional[bytes], actual: Optional[bytes], iteration: Optional[int] = None) -> None:
        self.expected = expected
        self.actual = actual
        self.iteration = iteration
        where = "" if iteration is None else f" at iteration {iteration}"
        super().__init__(
            f"digest mismatch{where}: expected {_hex_or_none(expected)}, got {_hex_or_none(actual)}"
        )


class UnsupportedLength(AcvpError):
    """The hash provider cannot consume a message that is not byte aligned."""


class ProviderError(AcvpError):
    """No hash provider (or algorithm within a provider) is available."""


def _hex_or_none(data: Optional[bytes]) -> str:
    return "<missing>" if data is None else data.hex()
