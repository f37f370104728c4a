"""Pure kernel domain helpers (no I/O except SystemClock)."""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = ["Clock", "DeterministicClock", "SystemClock"]
