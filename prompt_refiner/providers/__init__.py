"""Provider implementations for prompt refinement"""

from .base import BaseProvider
from .daemon import DaemonProvider, send_to_daemon
from .webhook import WebhookProvider, send_to_webhook

__all__ = ['BaseProvider', 'DaemonProvider', 'WebhookProvider', 'send_to_daemon', 'send_to_webhook']
