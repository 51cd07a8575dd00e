from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable


HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class CheckResult:
    name: str
    status: str
    duration_ms: float
    message: str | None = None
    critical: bool = True


@dataclass
class HealthChecks:
    """
    Named health checks, built once at startup and handed to the routes.
    A check returns a message on success and raises on failure.
    """

    checks: dict[str, tuple[Callable[[], str | None], bool]] = field(default_factory=dict)

    def register(self, name: str, check: Callable[[], str | None], critical: bool = True) -> None:
        self.checks[name] = (check, critical)

    def run_check(self, name: str) -> CheckResult:
        if name not in self.checks:
            raise KeyError(name)
        check, critical = self.checks[name]
        started = time.perf_counter()
        try:
            message = check()
            status = HEALTHY
        except Exception as e:
            logging.getLogger(__name__).error("Health check failed", extra={"reason": f"{name}: {e}"})
            message = str(e)
            status = UNHEALTHY if critical else DEGRADED
        return CheckResult(
            name=name,
            status=status,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            message=message,
            critical=critical,
        )

    def run_all(self) -> dict[str, object]:
        results = [self.run_check(name) for name in self.checks]
        if any(r.status == UNHEALTHY for r in results):
            overall = UNHEALTHY
        elif any(r.status == DEGRADED for r in results):
            overall = DEGRADED
        else:
            overall = HEALTHY
        return {
            "status": overall,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {
                r.name: {"status": r.status, "duration_ms": r.duration_ms, "message": r.message}
                for r in results
            },
        }

    def quick(self) -> dict[str, object]:
        critical = [name for name, (_, is_critical) in self.checks.items() if is_critical]
        results = [self.run_check(name) for name in critical]
        return {
            "status": UNHEALTHY if any(r.status == UNHEALTHY for r in results) else HEALTHY,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
