"""
Rule store configuration.
"""

from dataclasses import dataclass


@dataclass
class RuleStoreConfig:
    """Rule store configuration."""

    backend: str = "sqlite"  # sqlite | memory
    db_path: str = "kubesnoop.db"
    seed_defaults: bool = True

    @property
    def database_url(self) -> str:
        if self.db_path == ":memory:":
            return "sqlite://"
        return f"sqlite:///{self.db_path}"
