from .node_lib import NodeData, function_lib, function_table, get_nodes, \
                      get_function_node, safe_divide
from .node import Node
from .tree import Tree
from .population import Population
from .data import target_data, load_data
from .base_class import SymbolicRegressor, absolute_error, evolve

__version__ = "1.0.0"
