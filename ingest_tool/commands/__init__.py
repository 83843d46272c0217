"""CLI command implementations."""

from .ingest import cmd_ingest, ProgressBarObserver
from .plan import cmd_plan
from .settings import cmd_settings_show, cmd_settings_set, cmd_settings_reset

__all__ = [
    'cmd_ingest',
    'cmd_plan',
    'cmd_settings_show',
    'cmd_settings_set',
    'cmd_settings_reset',
    'ProgressBarObserver',
]
