"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from kubesnoop.core.config.evaluation_config import EvaluationConfig
from kubesnoop.core.config.logging_config import LoggingConfig
from kubesnoop.core.config.rule_store_config import RuleStoreConfig

# Load environment variables from a .env file
load_dotenv()

SUPPORTED_BACKENDS = {"sqlite", "memory"}
SUPPORTED_LOG_FORMATS = {"console", "json"}


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.rule_store = RuleStoreConfig(
            backend=os.getenv("KUBESNOOP_RULES_BACKEND", "sqlite").lower(),
            db_path=os.getenv("KUBESNOOP_RULES_DB", "kubesnoop.db"),
            seed_defaults=os.getenv("KUBESNOOP_SEED_DEFAULTS", "true").lower() == "true",
        )

        self.evaluation = EvaluationConfig(
            condition_cache_size=int(os.getenv("KUBESNOOP_CONDITION_CACHE_SIZE", "256")),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format=os.getenv("LOG_FORMAT", "console").lower(),
            file_path=os.getenv("LOG_FILE_PATH"),
        )

        # Development settings
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.environment = os.getenv("ENVIRONMENT", "development")

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if self.rule_store.backend not in SUPPORTED_BACKENDS:
            errors.append(f"KUBESNOOP_RULES_BACKEND must be one of {sorted(SUPPORTED_BACKENDS)}")

        if self.rule_store.backend == "sqlite" and not self.rule_store.db_path:
            errors.append("KUBESNOOP_RULES_DB is required for the sqlite backend")

        if self.evaluation.condition_cache_size <= 0:
            errors.append("KUBESNOOP_CONDITION_CACHE_SIZE must be positive")

        if self.logging.format not in SUPPORTED_LOG_FORMATS:
            errors.append(f"LOG_FORMAT must be one of {sorted(SUPPORTED_LOG_FORMATS)}")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
