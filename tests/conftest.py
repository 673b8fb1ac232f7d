"""Global pytest configuration.

Exposes the shared graph fixtures from `tests.lib.algorithms.sample_graphs`
to every test module.
"""

from tests.lib.algorithms.sample_graphs import *  # noqa: F401,F403
