"""Dependency injection container."""

import inspect
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import (
    ICandidateSelector,
    IDirectoryMonitor,
    IDirectoryPipeline,
    IDownloadManager,
    ILLMService,
    IMetadataService,
    ISubtitleResolver,
    ISubtitleService,
    ITitleResolver,
    ITranslationFallback,
)

T = TypeVar("T")

_MISSING = object()


class Container:
    """Dependency injection container wiring the subtitle pipeline."""

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        """Initialize container.

        Args:
            config_manager: Configuration manager instance. If None, creates default.
        """
        self._services: Dict[Type, Type] = {}
        self._instances: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Register a class to be built once, on first use.

        Args:
            interface: Interface type.
            implementation: Implementation type.
        """
        self._services[interface] = implementation
        self._logger.debug(
            f"Registered singleton: {interface.__name__} -> {implementation.__name__}"
        )

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Register a pre-built instance, replacing any class registration.

        Args:
            interface: Interface type.
            instance: Pre-created instance.
        """
        self._instances[interface] = instance
        self._logger.debug(f"Registered instance: {interface.__name__}")

    def is_registered(self, interface: Type) -> bool:
        """Check whether an interface can be resolved."""
        return interface in self._instances or interface in self._services

    def get(self, interface: Type[T]) -> T:
        """Get service instance.

        Args:
            interface: Interface type to resolve.

        Returns:
            Service instance.

        Raises:
            ValueError: If service is not registered.
        """
        if interface not in self._instances:
            if interface not in self._services:
                raise ValueError(f"Service not registered: {interface.__name__}")
            self._instances[interface] = self._create_instance(self._services[interface])
        return self._instances[interface]  # type: ignore

    def get_config(self) -> Config:
        """Get configuration instance."""
        return self._config_manager.get_config()

    def _create_instance(self, implementation: Type[T]) -> T:
        """Build an implementation, injecting its constructor dependencies.

        Args:
            implementation: Implementation class to instantiate.

        Returns:
            Created instance with dependencies injected.
        """
        kwargs = {}
        for name, param in inspect.signature(implementation.__init__).parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            value = self._resolve_parameter(implementation, name, param)
            if value is not _MISSING:
                kwargs[name] = value

        return implementation(**kwargs)

    def _resolve_parameter(self, owner: Type, name: str, param: inspect.Parameter) -> Any:
        """Find the value for one constructor parameter.

        Parameters with defaults or generic annotations (``Callable[...]``)
        are left to the constructor.
        """
        annotation = param.annotation
        if annotation is Config:
            return self.get_config()
        if hasattr(annotation, "__origin__"):
            return _MISSING
        if isinstance(annotation, type) and self.is_registered(annotation):
            return self.get(annotation)
        if param.default is inspect.Parameter.empty:
            self._logger.warning(
                f"Cannot resolve dependency of {owner.__name__}: {name} ({annotation})"
            )
        return _MISSING

    def configure_default_services(self) -> None:
        """Configure default service registrations."""
        from ..core.services import (
            AnthropicLLMService,
            CandidateSelector,
            DirectoryMonitor,
            DirectoryPipeline,
            DownloadManager,
            OpenAILLMService,
            OpenSubtitlesService,
            QualityRanker,
            SubtitleResolver,
            TitleResolver,
            TMDbService,
            TranslationFallback,
        )

        config = self.get_config()

        # DeepSeek speaks the OpenAI chat completions protocol
        if config.llm.provider in ("deepseek", "openai"):
            self.register_singleton(ILLMService, OpenAILLMService)  # type: ignore
        elif config.llm.provider == "anthropic":
            self.register_singleton(ILLMService, AnthropicLLMService)  # type: ignore
        else:
            raise ValueError(f"Unsupported LLM provider: {config.llm.provider}")

        # External services
        self.register_singleton(IMetadataService, TMDbService)  # type: ignore
        self.register_singleton(ISubtitleService, OpenSubtitlesService)  # type: ignore

        # Pipeline stages
        self.register_singleton(ICandidateSelector, CandidateSelector)  # type: ignore
        self.register_singleton(ITitleResolver, TitleResolver)  # type: ignore
        self.register_singleton(ISubtitleResolver, SubtitleResolver)  # type: ignore
        self.register_singleton(QualityRanker, QualityRanker)
        self.register_singleton(IDownloadManager, DownloadManager)  # type: ignore
        self.register_singleton(ITranslationFallback, TranslationFallback)  # type: ignore
        self.register_singleton(IDirectoryPipeline, DirectoryPipeline)  # type: ignore
        self.register_singleton(IDirectoryMonitor, DirectoryMonitor)  # type: ignore

        self._logger.info("Default services configured")

    async def close(self) -> None:
        """Close HTTP sessions of the services created so far."""
        for instance in list(self._instances.values()):
            close = getattr(instance, "close", None)
            if close is None:
                continue
            try:
                await close()
            except Exception as e:
                self._logger.warning(f"Failed to close {type(instance).__name__}: {e}")

    async def __aenter__(self) -> "Container":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
