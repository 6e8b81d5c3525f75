"""
Per-client context for the Flask app.

Every browser gets a client id, the only value kept in the signed session
cookie. Its durable storage (session, preferences, favorites) is a JSON
file named after that id under ``storage_dir``, and in process memory it
has its own scheduler, store and page controllers. A cold start rebuilds
the context from the file; idle contexts are evicted from memory.
"""

import logging
import re
import threading
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from flask import session

from kazi.api import ApiBundle, build_api
from kazi.common.config import KaziSettings
from kazi.common.logger import ClientLogger, get_logger
from kazi.controllers import AuthFlowController, DashboardController
from kazi.state import AppStore, JsonFileStorage, Scheduler, StorageBackend

logger = logging.getLogger(__name__)

CLIENT_ID_KEY = "kazi_client_id"
CLIENT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")

StorageFactory = Callable[[str], StorageBackend]
ApiFactory = Callable[[AppStore], ApiBundle]


@dataclass
class ClientContext:
    """Everything one browser needs between requests."""
    client_id: str
    scheduler: Scheduler
    store: AppStore
    api: ApiBundle
    auth_flow: AuthFlowController
    dashboard: DashboardController
    log: ClientLogger
    last_seen: float = 0.0


class ClientRegistry:
    """
    Maps client ids to their contexts.

    Args:
        settings: Application settings (backend URL, timers, storage dir)
        storage_factory: Builds the durable storage for a client id
        api_factory: Builds the backend APIs for a store
        clock: Clock for each client's scheduler and for idle eviction
    """

    def __init__(
        self,
        settings: KaziSettings,
        storage_factory: Optional[StorageFactory] = None,
        api_factory: Optional[ApiFactory] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings
        self.storage_factory = storage_factory or self._default_storage
        self.api_factory = api_factory or self._default_api
        self.clock = clock
        self._now = clock or time.monotonic
        self._clients: Dict[str, ClientContext] = {}
        self._lock = threading.Lock()

    def _default_storage(self, client_id: str) -> StorageBackend:
        return JsonFileStorage(Path(self.settings.storage_dir) / f"{client_id}.json")

    def _default_api(self, store: AppStore) -> ApiBundle:
        return build_api(
            self.settings.api_base_url,
            token_provider=lambda: store.state.token,
            timeout=self.settings.request_timeout,
        )

    def _create(self, client_id: str) -> ClientContext:
        scheduler = Scheduler(self.clock) if self.clock else Scheduler()
        store = AppStore(
            self.storage_factory(client_id),
            scheduler=scheduler,
            message_timeout=self.settings.message_timeout_seconds,
        )
        store.initialize()
        api = self.api_factory(store)
        context = ClientContext(
            client_id=client_id,
            scheduler=scheduler,
            store=store,
            api=api,
            auth_flow=AuthFlowController(store, api.auth, self.settings),
            dashboard=DashboardController(store, api, self.settings),
            log=get_logger(__name__, client_id),
        )
        context.log.info(f"New client context (route={store.state.route})")
        return context

    def current(self) -> ClientContext:
        """
        Context of the browser making the current request.

        Assigns a client id on first contact (or when the cookie holds a
        malformed one), evicts idle contexts and runs any timers that came
        due since the client's last request.
        """
        client_id = session.get(CLIENT_ID_KEY)
        if not isinstance(client_id, str) or not CLIENT_ID_PATTERN.match(client_id):
            client_id = uuid.uuid4().hex
            session[CLIENT_ID_KEY] = client_id
            session.permanent = True

        self.sweep(keep=client_id)
        with self._lock:
            context = self._clients.get(client_id)
            if context is None:
                context = self._create(client_id)
                self._clients[client_id] = context
            context.last_seen = self._now()

        ran = context.scheduler.run_due()
        if ran:
            context.log.debug(f"Ran {ran} due timer(s)")
        return context

    def sweep(self, keep: Optional[str] = None) -> int:
        """
        Evict contexts idle for longer than ``client_idle_seconds``.

        Timers that came due are run first so a pending sign-out still
        reaches durable storage. Returns the number of evicted contexts.
        """
        cutoff = self._now() - self.settings.client_idle_seconds
        with self._lock:
            idle = [
                context for client_id, context in self._clients.items()
                if client_id != keep and context.last_seen < cutoff
            ]
        for context in idle:
            context.scheduler.run_due()
            self.discard(context.client_id)
        if idle:
            logger.info(f"Evicted {len(idle)} idle client context(s)")
        return len(idle)

    def discard(self, client_id: str) -> None:
        with self._lock:
            self._clients.pop(client_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)
