"""
Webhook relay turning upstream push events into repository dispatches.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""

from preoccupied.hookrelay.app import app
from preoccupied.hookrelay.config import get_config


__all__ = ['app', 'get_config']


# The end.
