from __future__ import annotations
from typing import Iterable, List, Optional


class PodconnError(Exception):
    pass


class ReadError(PodconnError):
    """A socket table could not be read (process gone, permissions, ...)."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"failed to read file {path!r}: {cause}")
        self.path = path
        self.cause = cause


class DecodeError(PodconnError):
    def __init__(self, raw: str, reason: str):
        super().__init__(f"{reason} {raw!r}")
        self.raw = raw
        self.reason = reason


class MalformedField(DecodeError):
    def __init__(self, raw: str):
        super().__init__(raw, "does not contain port")


class MultiError(PodconnError):
    """Several failures from one fan-out step, reported together."""

    def __init__(self, errors: Iterable[BaseException]):
        self.errors: List[BaseException] = list(errors)
        super().__init__(self._summary())

    def _summary(self) -> str:
        if len(self.errors) == 1:
            return f"1 error occurred: {self.errors[0]}"
        lines = "; ".join(str(e) for e in self.errors)
        return f"{len(self.errors)} errors occurred: {lines}"

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)

    @classmethod
    def from_errors(cls, errors: Iterable[BaseException]) -> Optional["MultiError"]:
        # no errors means success, never an empty aggregate
        errs = list(errors)
        return cls(errs) if errs else None


class PidResolutionError(PodconnError):
    def __init__(self, container_id: str, reason: str):
        super().__init__(f"{container_id!r}: {reason}")
        self.container_id = container_id
        self.reason = reason


class ProcessNotReady(PidResolutionError):
    """The runtime knows the container but reports no live process for it yet."""

    def __init__(self, container_id: str, pid: int):
        super().__init__(container_id, f"container has no running process (pid {pid})")
        self.pid = pid


class WorkloadListError(PodconnError):
    def __init__(self, node_name: str, cause: BaseException):
        super().__init__(f"failed to get pods for node {node_name!r}: {cause}")
        self.node_name = node_name
        self.cause = cause


class ConfigError(PodconnError):
    pass
