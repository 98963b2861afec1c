from __future__ import annotations
import importlib
import logging
from typing import Any, Callable, Dict, Sequence

from .errors import ProviderError

log = logging.getLogger(__name__)

ADAPTER_MODULES: Sequence[str] = ("acvpkit_cryptography", "acvpkit_hashlib")


class _Registry:
    def __init__(self) -> None:
        self._items: Dict[str, Any] = {}

    def register(self, name: str) -> Callable[[Any], Any]:
        def _inner(cls_or_obj: Any) -> Any:
            self._items[name] = cls_or_obj
            return cls_or_obj
        return _inner

    def get(self, name: str) -> Any:
        try:
            return self._items[name]
        except KeyError:
            known = ", ".join(sorted(self._items)) or "none"
            raise ProviderError(f"unknown hash provider {name!r} (registered: {known})") from None

    def list(self) -> Dict[str, Any]:
        return dict(self._items)

registry = _Registry()


def load_adapters(modules: Sequence[str] = ADAPTER_MODULES) -> None:
    """Import adapter packages so their providers register themselves."""
    for mod in modules:
        try:
            importlib.import_module(mod)
        except ImportError as exc:
            log.warning("hash adapter %s unavailable: %s", mod, exc)


def get_provider(name: str) -> Any:
    """Instantiate the provider registered under ``name``."""
    if name not in registry.list():
        load_adapters()
    return registry.get(name)()
