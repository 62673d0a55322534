import pathlib
from collections import namedtuple

import pytest
import numpy as np

from evolvefn import NodeData, get_function_node, get_nodes


@pytest.fixture
def paths():
    """Fixture that return an object with different paths as attributes."""
    fields = ['root', 'script', 'evolvefn', 'test']
    Paths = namedtuple('Paths', fields)
    root = pathlib.Path(__file__).resolve().parents[2]
    return Paths(
        root = root,
        script = root / 'evolve-fn.py',
        evolvefn = root / 'evolvefn',
        test = root / 'evolvefn' / 'test',
    )

@pytest.fixture
def rng():
    return np.random.RandomState(1000)

@pytest.fixture()
def nodes():
    return ([NodeData('x', 'terminal')] +
            [get_function_node(l) for l in ['+', '-', '*', '/']])

@pytest.fixture
def get_nodes_(nodes):
    def get_nodes_(*args, **kwargs):
        return get_nodes(*args, **kwargs, lib=nodes)
    return get_nodes_
