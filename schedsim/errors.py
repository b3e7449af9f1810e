from __future__ import annotations


class SchedulerError(Exception):
    """Base class for errors raised by the simulator."""


class InvalidWorkloadError(SchedulerError, ValueError):
    """A process spec, quantum or generator parameter failed validation."""


class UnknownPolicyError(SchedulerError, ValueError):
    def __init__(self, policy: str, supported) -> None:
        self.policy = policy
        self.supported = list(supported)
        super().__init__(
            f"Unknown scheduling algorithm '{policy}'. Supported: {', '.join(self.supported)}"
        )


class InvalidSessionError(SchedulerError, ValueError):
    """An interactive session was asked for something it cannot do."""


class ConfigError(SchedulerError, ValueError):
    """A SCHEDSIM_* environment variable has an invalid value."""
