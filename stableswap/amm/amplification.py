"""Amplification coefficient schedule.

A moves linearly from `initial_a` at `initial_time` to `future_a` at
`future_time` and stays at `future_a` afterwards. Ramps are bounded in
size (MAX_A_CHANGE) and duration (MIN_RAMP_TIME) so the curve cannot be
repriced within a single block.
"""

from __future__ import annotations

from dataclasses import dataclass

from stableswap.constants import MAX_A, MAX_A_CHANGE, MIN_RAMP_TIME
from stableswap.errors import InvalidParameterError, RampNotAllowedError
from stableswap.safe_int import S


@dataclass
class AmplificationRamp:
    """Piecewise-linear amplification schedule.

    Attributes:
        initial_a: A at the start of the current ramp
        future_a: A at (and after) the end of the current ramp
        initial_time: Unix time the current ramp started
        future_time: Unix time the current ramp ends
    """

    initial_a: int
    future_a: int
    initial_time: int = 0
    future_time: int = 0

    @classmethod
    def constant(cls, amplification: int) -> AmplificationRamp:
        """Schedule that holds `amplification` forever.

        Times are zero so the first ramp is never blocked by the cooldown.
        """
        if amplification <= 0 or amplification >= MAX_A:
            raise InvalidParameterError(
                f"Amplification must be in [1, {MAX_A - 1}], got {amplification}"
            )
        return cls(initial_a=amplification, future_a=amplification)

    def effective_a(self, now: int) -> int:
        """Amplification coefficient in effect at `now`."""
        if now >= self.future_time:
            return self.future_a

        elapsed = S(now) - self.initial_time
        duration = S(self.future_time) - self.initial_time
        # Increasing and decreasing ramps are handled separately so the
        # interpolation never passes through a negative value
        if self.future_a > self.initial_a:
            step = (S(self.future_a) - self.initial_a) * elapsed // duration
            return (S(self.initial_a) + step).value
        step = (S(self.initial_a) - self.future_a) * elapsed // duration
        return (S(self.initial_a) - step).value

    @property
    def is_ramping(self) -> bool:
        """True while the schedule still has a target different from its start."""
        return self.initial_a != self.future_a and self.future_time > self.initial_time

    def ramp(self, future_a: int, future_time: int, now: int) -> int:
        """Start a new ramp from the current effective A.

        Args:
            future_a: Target amplification
            future_time: Unix time the target is reached
            now: Current unix time

        Returns:
            The effective A snapshotted as the new initial value

        Raises:
            RampNotAllowedError: If the previous ramp started less than
                MIN_RAMP_TIME ago
            InvalidParameterError: If the target time is too close, or the
                target is zero, >= MAX_A, or more than MAX_A_CHANGE times away
                from the current effective A
        """
        if now < self.initial_time + MIN_RAMP_TIME:
            raise RampNotAllowedError(
                f"Ramp cooldown active until {self.initial_time + MIN_RAMP_TIME}, now {now}"
            )
        if future_time < now + MIN_RAMP_TIME:
            raise InvalidParameterError(
                f"Ramp must last at least {MIN_RAMP_TIME}s, ends at {future_time} (now {now})"
            )
        if future_a <= 0 or future_a >= MAX_A:
            raise InvalidParameterError(f"Future A must be in [1, {MAX_A - 1}], got {future_a}")

        current_a = self.effective_a(now)
        if future_a >= current_a:
            within_bound = future_a <= current_a * MAX_A_CHANGE
        else:
            within_bound = future_a * MAX_A_CHANGE >= current_a
        if not within_bound:
            raise InvalidParameterError(
                f"Future A {future_a} is more than {MAX_A_CHANGE}x away from current A {current_a}"
            )

        self.initial_a = current_a
        self.future_a = future_a
        self.initial_time = now
        self.future_time = future_time
        return current_a

    def stop(self, now: int) -> int:
        """Freeze A at its current effective value. Returns that value."""
        current_a = self.effective_a(now)
        self.initial_a = current_a
        self.future_a = current_a
        self.initial_time = now
        self.future_time = now
        return current_a
