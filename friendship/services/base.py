"""
Base service classes and shared context.

The ServiceContext holds the shared store and resolver that services need.
This allows the CLI (main.py) and the API to share the same logic.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from ..config import Config, load_config
from ..graph import GraphStore, FriendDegreeResolver

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """
    Shared context for all services.

    Holds the graph store handle and the stateless resolver built on it.
    """
    config: Config
    store: GraphStore
    resolver: FriendDegreeResolver

    @classmethod
    def create(
        cls,
        config: Optional[Config] = None,
        store: Optional[GraphStore] = None
    ) -> "ServiceContext":
        """
        Factory method to create a ServiceContext with all dependencies.

        Args:
            config: Optional config (loads from env if not provided)
            store: Optional store (opens the configured graph file if not provided)

        Returns:
            Configured ServiceContext
        """
        cfg = config or load_config()
        graph_store = store or GraphStore(cfg.storage.graph_file)

        return cls(
            config=cfg,
            store=graph_store,
            resolver=FriendDegreeResolver(graph_store)
        )

    def close(self):
        """Flush the store to disk."""
        self.store.save()
        logger.info("Graph store flushed")


class BaseService:
    """
    Base class for all services.

    Each service receives the shared context and provides focused functionality.
    """

    def __init__(self, context: ServiceContext):
        self.context = context

    @property
    def config(self) -> Config:
        return self.context.config

    @property
    def store(self) -> GraphStore:
        return self.context.store

    @property
    def resolver(self) -> FriendDegreeResolver:
        return self.context.resolver
