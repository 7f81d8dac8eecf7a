"""Test Redis lock store."""

from unittest.mock import MagicMock, patch

from leadsync.repositories.redis.redis_lock import (
    _RELEASE_SCRIPT,
    RedisLockStore,
    str_to_bool,
)


class TestRedisLockStore:
    """Test cases for RedisLockStore class."""

    def setup_method(self) -> None:
        """Set up test fixtures before each test method."""
        self.test_host = "test_host"
        self.test_port = 6379
        self.test_password = "test_password"
        self.test_ssl = "true"
        self.handler = MagicMock()
        self.release_script = self.handler.register_script.return_value
        self.store = RedisLockStore(
            self.test_host,
            self.test_port,
            self.test_password,
            self.test_ssl,
            handler=self.handler,
        )

    def test_init_creates_redis_connection(self) -> None:
        """Test that __init__ creates a Redis connection with correct parameters."""
        with patch("redis.Redis") as MockRedis:
            mock_redis_instance = MagicMock()
            MockRedis.return_value = mock_redis_instance

            # Act
            store = RedisLockStore(
                self.test_host, self.test_port, self.test_password, self.test_ssl
            )

            # Assert
            MockRedis.assert_called_once_with(
                host=self.test_host,
                port=self.test_port,
                password=self.test_password,
                ssl=True,  # str_to_bool converts "true" to True
                db=0,
                ssl_cert_reqs=None,
            )
            assert store.handler == mock_redis_instance

    def test_str_to_bool(self) -> None:
        assert str_to_bool("True")
        assert str_to_bool("1")
        assert not str_to_bool("no")

    def test_acquire_sets_key_only_if_free(self) -> None:
        self.handler.set.return_value = True

        assert self.store.acquire("sync", "token-1", 60)
        self.handler.set.assert_called_once_with("sync", "token-1", nx=True, ex=60)

    def test_acquire_fails_when_key_is_held(self) -> None:
        self.handler.set.return_value = None
        assert not self.store.acquire("sync", "token-1", 60)

    def test_release_runs_one_compare_and_delete_script(self) -> None:
        self.release_script.return_value = 1

        assert self.store.release("sync", "token-1")
        self.handler.register_script.assert_called_once_with(_RELEASE_SCRIPT)
        self.release_script.assert_called_once_with(keys=["sync"], args=["token-1"])
        self.handler.get.assert_not_called()
        self.handler.delete.assert_not_called()

    def test_release_keeps_foreign_or_expired_token(self) -> None:
        self.release_script.return_value = 0
        assert not self.store.release("sync", "token-1")
