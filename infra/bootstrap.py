"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the generation service from configuration.
"""

from typing import Optional

from generation import GenerationService

from .config import InfraConfig, get_config


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.generation_service = self.config.create_generation_service()

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance

        Raises:
            ConfigurationError: first call without a usable credential
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def get_generation_service(self) -> GenerationService:
        """Get generation service."""
        return self.generation_service

    def __repr__(self) -> str:
        """String representation showing configured backend."""
        return (
            f"InfraBootstrap(llm={self.config.llm_backend}, "
            f"fallback_models={len(self.config.fallback_models)})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with all backends initialized
    """
    return InfraBootstrap.get_instance(config)
