"""Run context threaded through every provisioning operation.

SampleContext replaces package-level client handles: it is built once at
startup and passed explicitly, so tests can swap in fake clients.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from azure.core.exceptions import AzureError

from aznic.config import SampleConfig
from aznic.exceptions import ProvisioningError
from aznic.log_sanitizer import LogSanitizer
from aznic.modules.progress import ProgressDisplay

logger = logging.getLogger(__name__)


@dataclass
class AzureClients:
    """Management clients for one subscription.

    Typed as Any so fakes exposing the same operation groups can stand in.
    """

    resources: Any
    network: Any
    storage: Any
    compute: Any


@dataclass
class SampleContext:
    """Configuration, clients and status output for one run."""

    config: SampleConfig
    clients: AzureClients
    progress: ProgressDisplay = field(default_factory=ProgressDisplay)

    @property
    def resource_group(self) -> str:
        return self.config.resource_group


@contextmanager
def remote_call(label: str) -> Iterator[None]:
    """Convert Azure SDK failures inside the block into ProvisioningError.

    Args:
        label: What was being attempted, e.g. "Create subnet 'Front-end' failed"

    Raises:
        ProvisioningError: If the block raises an AzureError
    """
    try:
        yield
    except AzureError as e:
        safe_error = LogSanitizer.sanitize_exception(e)
        logger.debug(f"{label} ({type(e).__name__})")
        raise ProvisioningError(label, safe_error) from e
