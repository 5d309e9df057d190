"""
NSCA Utilities Module
Helper functions for channel construction.
"""

import socket

from typing import Optional


def resolve_reporting_host() -> Optional[str]:
    """Address of the local machine, or None if it cannot be resolved."""
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        return None


def substitute_names(template: str, owner: Optional[type] = None) -> str:
    """
    Replace %packageName% and %className% with the owner's names.

    Example:
        substitute_names("%packageName%.%className%.bus", MyService)
        # "myapp.services.MyService.bus"
    """
    if owner is None or not template:
        return template

    return (
        template
        .replace("%packageName%", owner.__module__)
        .replace("%className%", owner.__qualname__)
    )
