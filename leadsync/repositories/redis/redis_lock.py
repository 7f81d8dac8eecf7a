"""Module for holding short-lived exclusive locks in a Redis database."""

import logging
from typing import Optional, Union

import redis

logger = logging.getLogger(__name__)

# Compare-and-delete in one server-side step.
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


def str_to_bool(value: str) -> bool:
    """Convert REDIS_SSL env variable to boolean."""
    return value.lower() in ("true", "1", "yes")


class RedisLockStore:
    """Handles lock keys in the Redis database."""

    def __init__(
        self,
        host: str,
        port: int,
        password: Optional[str],
        ssl: Union[str, bool],
        handler: Optional[redis.Redis] = None,
    ) -> None:
        """
        Initialize a connection to the Redis database.

        Args:
            host (str): The hostname or IP address of the Redis server.
            port (int): The port number of the Redis server.
            password (Optional[str]): Password, if the server requires one.
            ssl (Union[str, bool]): Whether to connect over TLS.
            handler (Optional[redis.Redis]): Pre-built client, mostly for tests.
        """
        ssl = str_to_bool(ssl) if isinstance(ssl, str) else ssl
        self.handler = handler or redis.Redis(
            host=host,
            port=port,
            password=password,
            ssl=ssl,
            db=0,
            ssl_cert_reqs=None,
        )
        self._release = self.handler.register_script(_RELEASE_SCRIPT)

    def acquire(self, key: str, token: str, ttl_seconds: int) -> bool:
        """Set ``key`` to ``token`` only if it is free. Returns True when acquired."""
        acquired = bool(self.handler.set(key, token, nx=True, ex=ttl_seconds))
        logger.info(f"Lock {key} acquired: {acquired}")
        return acquired

    def release(self, key: str, token: str) -> bool:
        """Delete ``key`` if it still holds ``token``. Returns True when released."""
        released = bool(self._release(keys=[key], args=[token]))
        if released:
            logger.info(f"Lock {key} released")
        else:
            logger.warning(f"Lock {key} expired or is held by another owner, not releasing")
        return released
