import logging
import threading
import time
from typing import Any, Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import (
    AutoReconnect,
    ConfigurationError,
    ConnectionFailure,
    DuplicateKeyError,
    PyMongoError,
)
from pymongo.server_api import ServerApi
from pymongo.uri_parser import parse_uri

from scalelog.core.config import Settings
from scalelog.core.errors import StorageError, StoreConnectionError

log = logging.getLogger(__name__)


class MeasurementStore:
    """
    Gateway to the document store.

    The client is created on first use and shared by every request the
    process serves.
    """

    def __init__(self, settings: Settings, client_factory: Callable[..., Any] = MongoClient):
        self.settings = settings
        self._client_factory = client_factory
        self._client = None
        self._lock = threading.Lock()

    def _get_client(self):
        with self._lock:
            if self._client is None:
                self._client = self._create_client()
            return self._client

    def _create_client(self):
        conn_string = self.settings.MONGODB_CONNECTION_STRING
        try:
            nodes = parse_uri(conn_string)["nodelist"]
            client = self._client_factory(
                conn_string,
                server_api=ServerApi("1"),
                tz_aware=True,
                timeoutMS=self.settings.MONGODB_TIMEOUT_MS,
            )
        except (ConfigurationError, ValueError) as exc:
            log.error("Invalid MongoDB connection string: %s", exc)
            raise StoreConnectionError() from exc
        except PyMongoError as exc:
            log.exception("Could not create MongoDB client")
            raise StoreConnectionError() from exc

        log.info("DB on %s", ",".join(f"{host}:{port}" for host, port in nodes))
        return client

    def open_collection(self, database_name: str, collection_name: str) -> Collection:
        if not database_name or not collection_name:
            raise ValueError("database_name and collection_name must be non-empty")
        return self._get_client()[database_name][collection_name]

    def measurements(self) -> Collection:
        return self.open_collection(
            self.settings.MONGODB_DATABASE,
            self.settings.MONGODB_COLLECTION,
        )

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    # ---------- store operations ----------

    def _run(self, name: str, op: Callable[[], Any]):
        max_retries = max(1, self.settings.MONGODB_MAX_RETRIES)
        retry_delay = self.settings.MONGODB_RETRY_DELAY

        for attempt in range(max_retries):
            try:
                return op()
            except AutoReconnect as exc:
                if attempt == max_retries - 1:
                    log.error("MongoDB %s failed after %d attempts: %s", name, max_retries, exc)
                    raise StoreConnectionError() from exc
                log.warning("MongoDB %s attempt %d failed, retrying...", name, attempt + 1)
                time.sleep(retry_delay * (2 ** attempt))
            except ConnectionFailure as exc:
                log.error("MongoDB %s failed: %s", name, exc)
                raise StoreConnectionError() from exc
            except PyMongoError as exc:
                log.exception("MongoDB %s failed", name)
                raise StorageError() from exc

    def insert_one(self, collection: Collection, document: dict):
        attempts = 0

        def _insert():
            nonlocal attempts
            attempts += 1
            try:
                return collection.insert_one(document).inserted_id
            except DuplicateKeyError:
                # an earlier attempt reached the server before the connection dropped
                if attempts > 1:
                    return document["_id"]
                raise

        return self._run("insert", _insert)

    def find_one(self, collection: Collection, query: dict, sort: Optional[list] = None) -> Optional[dict]:
        return self._run("find", lambda: collection.find_one(query, sort=sort))
