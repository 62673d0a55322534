"""
Node Library

Evolvefn programs (Trees) are composed of nodes of three types: the input
variable ('terminal'), numeric constants ('constant') and arithmetic
operators ('operator'). Each node carries a NodeData describing it, and in
several situations a subset of those NodeData is selected by type or arity.

This module includes:
  - NodeData (dataclass): includes all required node attributes
  - safe_divide (func): protected division, 0 where the divisor is 0
  - function_lib (list): NodeData objects for all supported operators
  - function_table (dict): the operator table, label -> arity
  - get_function_node (func): return NodeData for an operator symbol (e.g. '*')
  - get_nodes (func): a helper function for subsetting a list of NodeData's
"""


from dataclasses import dataclass
from typing import List
import numpy as np

def placeholder(*args, **kwargs):
    raise NotImplementedError()

@dataclass(frozen=True)
class NodeData:
    """Include all attributes required for a Node"""
    label: object             # Symbol ('x', '+') or value (constants)
    node_type: str            # terminal, constant or operator
    arity: int = 0            # Number of children
    numpy_func: callable = placeholder

    def __repr__(self):
        return f'<NodeData label={self.label!r} type={self.node_type}>'

# Custom Function definitions to avoid nan/inf values:
def safe_divide(a, b):
    """If dividing by 0, return 0"""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    zero = b == 0
    return np.where(zero, 0.0, a / np.where(zero, 1.0, b))

# Function node definitions
function_lib = [
    NodeData('+', 'operator', 2, numpy_func=np.add),
    NodeData('-', 'operator', 2, numpy_func=np.subtract),
    NodeData('*', 'operator', 2, numpy_func=np.multiply),
    NodeData('/', 'operator', 2, numpy_func=safe_divide),
]

function_table = {node.label: node.arity for node in function_lib}

def get_function_node(label: str) -> NodeData:
    """Return the NodeData for a function label"""
    for node in function_lib:
        if node.label == label:
            return node
    raise ValueError(f'NodeData not found for label: {label}')

def get_nodes(types: List[str]=None, arity=None,
              lib: List[NodeData]=function_lib) -> List[NodeData]:
    """Return all NodeDatas of given types and arity from a given lib

    Used by SymbolicRegressor with the lib of user-selected nodes, i.e. the
    variable terminal and the chosen operators"""
    return [node for node in lib if all((
        True if types is None else node.node_type in types,
        True if arity is None else node.arity == arity))]
