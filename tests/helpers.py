"""Shared fixtures for the test suite."""

from canalsim.core.process import Process
from configs import merge_configs


class Script(Process):
    """Process whose behaviour is a plain generator function of the process."""

    def __init__(self, scheduler, body, name=None):
        super().__init__(scheduler, name)
        self.body = body

    def behavior(self):
        return self.body(self)


def make_config(**overrides):
    """Small scenario with no generators; tests add ships by hand."""
    config = {
        'simulation': {'days': 10, 'random_seed': 7},
        'canal': {'capacity': 20, 'queueing': True, 'queue_limit': 5},
        'locks': {'dual': False, 'capacity': 2, 'time_in_lock': 90},
        'travel': {'time': 660},
        'generators': [],
        'accidents': {'enabled': False},
    }
    return merge_configs(config, overrides)
