"""Configuration module for the Friendship API."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_GRAPH_FILE = Path(__file__).parent.parent / "data" / "friendship_graph.json"


@dataclass
class StorageConfig:
    """Graph store persistence settings."""
    graph_file: Path = field(default_factory=lambda: Path(os.getenv("FRIENDSHIP_GRAPH_FILE", str(DEFAULT_GRAPH_FILE))))


@dataclass
class ApiConfig:
    """HTTP server settings."""
    host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))


@dataclass
class Config:
    """Main configuration container."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
