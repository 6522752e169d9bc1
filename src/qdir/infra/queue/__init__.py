from __future__ import annotations

"""
Queue Backend Infrastructure.

Facade over the publisher contract and its implementations.
"""

from qdir.infra.queue.publisher import DryRunPublisher, Publisher
from qdir.infra.queue.redis_client import RedisPublisher

__all__ = [
    "Publisher",
    "DryRunPublisher",
    "RedisPublisher",
]
