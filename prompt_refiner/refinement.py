"""Core refinement logic for prompt-refiner."""

import asyncio
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from prompt_refiner.config import (
    CliConfig,
    RefinerConfig,
    load_cli_config,
    load_config,
    load_refiner_config,
)
from prompt_refiner.providers.base import BaseProvider
from prompt_refiner.providers.daemon import DaemonProvider
from prompt_refiner.providers.webhook import WebhookProvider
from prompt_refiner.validation import validate_prompt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefineOptions:
    """Per-call overrides; None means "use the configured value"."""
    url: Optional[str] = None
    timeout_ms: Optional[int] = None
    max_retries: Optional[int] = None
    base_delay_ms: Optional[int] = None
    use_daemon: Optional[bool] = None
    socket_path: Optional[str] = None
    cancel_event: Optional[asyncio.Event] = None

    def merged(self, other: Optional['RefineOptions']) -> 'RefineOptions':
        """Return these options with every value set in ``other`` taking precedence."""
        if other is None:
            return self
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **changes)


class PromptRefiner:
    def __init__(
        self,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        defaults: Optional[RefineOptions] = None
    ):
        """
        Args:
            config_path: Optional YAML config file
            environ: Environment mapping to resolve settings from (default: os.environ)
            defaults: Options applied to every call unless overridden per call
        """
        self._environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self._file_data = load_config(config_path, self._environ)
        self.defaults = defaults or RefineOptions()

    def refiner_config(self, options: Optional[RefineOptions] = None) -> RefinerConfig:
        """Resolve webhook settings for one call"""
        opts = self.defaults.merged(options)
        overrides: Dict[str, Any] = {
            'webhook_url': opts.url,
            'timeout_ms': opts.timeout_ms,
            'max_retries': opts.max_retries,
            'base_delay_ms': opts.base_delay_ms,
        }
        return load_refiner_config(overrides, self._environ, self._file_data)

    def cli_config(self, options: Optional[RefineOptions] = None) -> CliConfig:
        """Resolve daemon flag, socket path and timeout for one call"""
        opts = self.defaults.merged(options)
        overrides: Dict[str, Any] = {
            'use_daemon': opts.use_daemon,
            'socket_path': opts.socket_path,
            'timeout_ms': opts.timeout_ms,
        }
        return load_cli_config(overrides, self._environ, self._file_data)

    def _select_provider(self, options: Optional[RefineOptions]) -> BaseProvider:
        cli = self.cli_config(options)
        if cli.use_daemon:
            return DaemonProvider(cli.socket_path, cli.timeout_ms)
        return WebhookProvider(self.refiner_config(options))

    async def refine(self, prompt: str, options: Optional[RefineOptions] = None) -> str:
        """Refine a prompt through the daemon or directly through the webhook

        Raises:
            RefinerError: EMPTY_PROMPT before any network activity, or
                whatever the selected provider raises
        """
        trimmed = validate_prompt(prompt)
        opts = self.defaults.merged(options)

        provider = self._select_provider(opts)
        logger.debug("Refining %d chars via %s", len(trimmed), provider.name)
        return await provider.refine(trimmed, cancel_event=opts.cancel_event)


async def refine_prompt(prompt: str, options: Optional[RefineOptions] = None) -> str:
    """Refine a prompt with settings resolved from the environment"""
    return await PromptRefiner().refine(prompt, options)


def create_refiner(defaults: Optional[RefineOptions] = None) -> PromptRefiner:
    """Create a refiner whose calls start from ``defaults``"""
    return PromptRefiner(defaults=defaults)
