# Trigger registration side-effects
from . import sha_adapter as _sha_adapter  # noqa: F401

__all__: list[str] = []
