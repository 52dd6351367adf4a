"""Dispatch loop owning the blocking key read."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from vimline.runtime import telemetry

from .keysource import KeySource

if TYPE_CHECKING:  # pragma: no cover
    from vimline.modes.base_mode import ModeResult
    from vimline.modes.mode_manager import ModeManager


def run_keys(manager: "ModeManager", source: KeySource) -> List["ModeResult"]:
    """Feed keys from ``source`` into ``manager`` until it runs dry.

    The read is bounded by the manager's pending timeout; a read that comes
    back empty expires the pending sequence.
    """

    results: List["ModeResult"] = []
    with telemetry.span("driver::run_keys", component="driver"):
        while not source.exhausted:
            timeout = manager.pending_timeout_seconds()
            key = source.read_key(timeout)
            if key is None:
                if timeout is not None:
                    results.extend(manager.force_timeout().values())
                continue
            results.append(manager.handle_key(key))
    return results


__all__ = ["run_keys"]
