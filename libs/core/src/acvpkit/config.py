from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from typing import Optional

"""Environment-driven harness configuration.

Recognised variables:
  - ACVPKIT_HASH_PROVIDER: registered hash provider name (default ``cryptography``)
  - ACVPKIT_JOBS: worker threads used to run cases (default: CPU count)
  - ACVPKIT_LDT_CHUNK: bytes fed to the hash per large-data chunk (default 1 MiB)
  - ACVPKIT_LOG_LEVEL: logging level name for the CLI (default WARNING)
"""

DEFAULT_PROVIDER = "cryptography"
DEFAULT_LDT_CHUNK = 1 << 20
DEFAULT_LOG_LEVEL = "WARNING"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if (v is not None and str(v).strip() != "") else default


def _default_jobs() -> int:
    return os.cpu_count() or 1


def _positive_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{name} must be positive")
    return value


@dataclass(frozen=True)
class HarnessConfig:
    provider: str = DEFAULT_PROVIDER
    jobs: int = field(default_factory=_default_jobs)
    ldt_chunk: int = DEFAULT_LDT_CHUNK
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "HarnessConfig":
        return cls(
            provider=_env("ACVPKIT_HASH_PROVIDER", DEFAULT_PROVIDER) or DEFAULT_PROVIDER,
            jobs=_positive_int("ACVPKIT_JOBS", _env("ACVPKIT_JOBS"), _default_jobs()),
            ldt_chunk=_positive_int("ACVPKIT_LDT_CHUNK", _env("ACVPKIT_LDT_CHUNK"), DEFAULT_LDT_CHUNK),
            log_level=(_env("ACVPKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper(),
        )

    def override(self, **changes: object) -> "HarnessConfig":
        """Return a copy with the non-None CLI overrides applied."""
        updates = {k: v for k, v in changes.items() if v is not None}
        if "jobs" in updates:
            updates["jobs"] = _positive_int("jobs", str(updates["jobs"]), self.jobs)
        return replace(self, **updates)
