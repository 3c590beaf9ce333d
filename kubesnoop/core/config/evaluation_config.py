"""
Evaluation engine configuration.
"""

from dataclasses import dataclass


@dataclass
class EvaluationConfig:
    """Evaluation engine configuration."""

    # Parsed condition expressions kept per condition text
    condition_cache_size: int = 256
