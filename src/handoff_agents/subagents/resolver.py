"""Normalization of worker targets into ``WorkerDescriptor`` values.

A target is either a bare worker, which defaults to
``DelegationMethod.DEFAULT_STREAM``, or a ``WorkerConfig`` carrying an
explicit method, schema and options. Resolution is pure and is repeated on
every lookup rather than cached.
"""

from __future__ import annotations

from handoff_agents.subagents.config import (
    DelegationMethod,
    WorkerConfig,
    WorkerDescriptor,
    WorkerTarget,
)


def resolve_target(target: WorkerTarget | WorkerDescriptor) -> WorkerDescriptor:
    """Resolve a worker target into a descriptor.

    Args:
        target: Bare worker, ``WorkerConfig`` or an already resolved descriptor.

    Returns:
        The equivalent ``WorkerDescriptor``.
    """
    if isinstance(target, WorkerDescriptor):
        return target
    if isinstance(target, WorkerConfig):
        return WorkerDescriptor(
            worker=target.worker,
            method=target.method,
            schema=target.schema,
            options=target.options,
        )
    return WorkerDescriptor(worker=target, method=DelegationMethod.DEFAULT_STREAM)


def get_worker_id(target: WorkerTarget | WorkerDescriptor) -> str:
    """Return the id of the worker behind ``target``."""
    return resolve_target(target).worker_id


def get_worker_name(target: WorkerTarget | WorkerDescriptor) -> str:
    """Return the name of the worker behind ``target``."""
    return resolve_target(target).worker_name


def get_worker_purpose(target: WorkerTarget | WorkerDescriptor) -> str:
    """Return the purpose line used for ``target`` in supervisor prompts."""
    return resolve_target(target).purpose
