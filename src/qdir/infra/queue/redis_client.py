from __future__ import annotations

"""
Redis Queue Client.

Thin adapter over redis-py exposing connect / publish / close. Each publish
is a single blocking LPUSH round-trip whose reply is discarded. There is no
retry: an unreachable backend at start-up is treated as a configuration
error.
"""

import logging
from typing import Optional

import redis

from qdir.domain.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_PORT,
)
from qdir.domain.errors import ConnectError, PublishError
from qdir.domain.traversal_models import ConnectionSettings

logger = logging.getLogger(__name__)


class RedisPublisher:
    """
    Publisher pushing items to the head of a Redis list.

    Instances are created with `connect()`, which verifies the backend is
    reachable before any traversal starts.
    """

    def __init__(self, client: redis.Redis, settings: Optional[ConnectionSettings] = None) -> None:
        self._client: Optional[redis.Redis] = client
        self.settings = settings or ConnectionSettings()

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    @classmethod
    def connect(
            cls,
            host: str = DEFAULT_REDIS_HOST,
            port: int = DEFAULT_REDIS_PORT,
            timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> "RedisPublisher":
        """
        Open a connection to the backend and check it with PING.

        Args:
            host: Redis server address.
            port: Redis server port.
            timeout: Bound, in seconds, on connecting and on every socket operation.

        Returns:
            RedisPublisher: A ready-to-use publisher.

        Raises:
            ConnectError: If the backend is unreachable or refuses the connection.
        """
        settings = ConnectionSettings(host=host, port=port, timeout=timeout)
        client = redis.Redis(
            host=host,
            port=port,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
        try:
            client.ping()
        except (redis.exceptions.RedisError, OSError) as e:
            client.close()
            raise ConnectError(f"Can't connect to Redis at {host}:{port}: {e}") from e

        logger.debug(f"Connected to Redis at {host}:{port}.")
        return cls(client, settings)

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> "RedisPublisher":
        return cls.connect(settings.host, settings.port, settings.timeout)

    def close(self) -> None:
        """Release the connection pool. Safe to call more than once."""
        if self._client is None:
            return
        client, self._client = self._client, None
        try:
            client.close()
        except redis.exceptions.RedisError as e:
            logger.debug(f"Error while closing the Redis connection: {e}")
        logger.debug("Redis connection closed.")

    @property
    def closed(self) -> bool:
        return self._client is None

    def __enter__(self) -> "RedisPublisher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # PUBLISHING
    # -------------------------------------------------------------------------

    def publish(self, queue_name: str, item: str) -> None:
        """
        Prepend an item to the named list (LPUSH).

        Raises:
            PublishError: If the connection is closed or the command fails.
        """
        if self._client is None:
            raise PublishError("Connection is closed.", queue_name=queue_name, item=item)
        try:
            self._client.lpush(queue_name, item)
        except (redis.exceptions.RedisError, OSError) as e:
            raise PublishError(str(e), queue_name=queue_name, item=item) from e
