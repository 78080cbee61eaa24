"""Support services wired by the composition root.

The templating helpers live in ``behapi.tools.templating`` and are not
re-exported here since jinja2 is optional.
"""

from behapi.tools.bag import Bag
from behapi.tools.debug import DebugReporter
from behapi.tools.history import Exchange, History
from behapi.tools.http import HttpClientFactory

__all__ = [
    "Bag",
    "DebugReporter",
    "Exchange",
    "History",
    "HttpClientFactory",
]
