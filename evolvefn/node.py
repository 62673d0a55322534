import ast
import math
from sympy import Symbol, nan, sympify, zoo
import numpy as np
from .node_lib import NodeData, get_function_node

# Used by load, i.e. recreate node from label strings
operators_ref = {
    ast.Add: '+',
    ast.Sub: '-',
    ast.Mult: '*',
    ast.Div: '/',
}

class Node:
    """An immutable tree node, with node data and a tuple of children

    Nodes hold no reference to their parent, so subtrees can be shared
    between trees. Modifying methods (set_child) return new nodes.
    """

    #++++++++++++++++++++++++++++
    #   Initialize              |
    #++++++++++++++++++++++++++++
    def __init__(self, node_data, children=None):
        children = tuple(children) if children else ()
        if len(children) != node_data.arity:
            raise ValueError(f'Node {node_data.label!r} takes {node_data.arity}'
                             f' children, got {len(children)}')
        self.node_data = node_data
        self.label = node_data.label
        self.node_type = node_data.node_type
        self.arity = node_data.arity
        self.numpy_func = node_data.numpy_func
        self.children = children

    @classmethod
    def load(cls, expr: str):
        """Load from a string expression, e.g. '((x)+(1.5))'"""
        expr = ast.parse(expr, mode='eval')
        return cls.recursive_load(expr)

    @classmethod
    def recursive_load(cls, expr):
        if isinstance(expr, ast.Expression):
            expr = expr.body
        if isinstance(expr, ast.Name):  # Terminal
            return cls(NodeData(expr.id, 'terminal'))
        elif isinstance(expr, ast.Constant):  # Constant
            return cls(NodeData(float(expr.value), 'constant'))
        elif (isinstance(expr, ast.UnaryOp) and isinstance(expr.op, ast.USub)
              and isinstance(expr.operand, ast.Constant)):  # Negative constant
            return cls(NodeData(-float(expr.operand.value), 'constant'))
        elif isinstance(expr, ast.BinOp) and type(expr.op) in operators_ref:
            node_data = get_function_node(operators_ref[type(expr.op)])
            children = [cls.recursive_load(c) for c in (expr.left, expr.right)]
            return cls(node_data, children)
        raise ValueError(f'Unsupported element in ast tree: {ast.dump(expr)}')

    #++++++++++++++++++++++++++++
    #   Generate Random         |
    #++++++++++++++++++++++++++++

    @classmethod
    def generate(cls, rng, get_nodes, depth, constant_range=(-5.0, 5.0)):
        """Return a randomly generated node and subtree (recursive)

        At depth 0, or when a fair coin says so, return a terminal: either
        the variable or a constant drawn from [low, high) with equal odds.
        Otherwise pick an operator and generate its children at depth-1.
        """
        if depth == 0 or rng.choice([False, True]):
            if rng.choice([False, True]):
                node_data = rng.choice(get_nodes(['terminal']))
            else:
                low, high = constant_range
                node_data = NodeData(float(rng.uniform(low, high)), 'constant')
            return cls(node_data)
        node_data = rng.choice(get_nodes(['operator']))
        children = [cls.generate(rng, get_nodes, depth - 1, constant_range)
                    for _ in range(node_data.arity)]
        return cls(node_data, children)

    #++++++++++++++++++++++++++++
    #   Display                 |
    #++++++++++++++++++++++++++++

    def __repr__(self):
        return f"<Node: {self.node_data!r}>"

    def parse(self, simplified=False):
        """Parse nodes either raw (all nodes) or simplified to string"""

        if simplified:
            raw_expr = self.parse(simplified=False)
            # Variables are always symbols, even when named like a sympy
            # object ('E', 'N', 'S', 'pi')
            symbols = {node.label: Symbol(node.label)
                       for node in self.iter_nodes()
                       if node.node_type == 'terminal'}
            result = sympify(raw_expr, locals=symbols)

            # Some trees, e.g. 'x/(x-x)', result in a 0-division, which
            # sympy parses as 'zoo'. Protected division yields 0 there, so
            # substitute 0 and let it propagate.
            while result.has(zoo):
                result = result.subs(zoo, 0)

            # '0/0' sympifies to 'nan', in which case don't accept sympified
            if result.has(nan):
                return raw_expr
            return str(result)

        # Position the label and subtrees so that no relational information is
        # lost (i.e. liberal use of parenthesis) and it is ast-interpretable.
        # Built bottom-up with an explicit stack, so depth is not limited.
        parsed = []
        for node in self.iter_postorder():
            if not node.children:  # terminals, constants
                parsed.append(f'({node.label})')
            else:
                right, left = parsed.pop(), parsed.pop()
                parsed.append(f'({left}{node.label}{right})')
        return parsed[0]

    def display(self, width=60, label_max_len=4):
        """Return a printable hierarchical tree representation of all nodes

        Cycle through depths starting with the root (centered). At each depth,
        for every node at that depth, portion the horizontal space among its
        children based on the max width of their subtree. Log the child nodes
        and their calculated width for the next loop, and draw the current node
        with lines connecting the first (left-most) child node to the last.
        """
        output = ''
        last_children = [(self, width)]  # Nodes to be added next loop
        for _ in range(self.depth + 1):
            depth_output = ''
            depth_children = []
            for (node, subtree_width) in last_children:
                label = ' ' if node is None else node.short_label(label_max_len)
                this_output = label.center(subtree_width)
                this_children = []      # Children from this item
                cum_width = 0           # Cumulative character-width of all subtrees
                cum_cols = 0            # Cumulative maximum node-width of all subtrees
                # If no children, propagate the empty spaces below terminal
                if not node or not node.children:
                    this_children.append((None, subtree_width))
                # If children, fill-in this_output with '_' to first/last child label
                else:
                    children_cols = [c.n_cols for c in node.children]
                    total_cols = sum(children_cols)
                    for child, child_cols in zip(node.children, children_cols):
                        # Convert each child's 'cols' into character spacing
                        cum_cols += child_cols
                        cum_ratio = cum_cols / total_cols
                        target_width = math.ceil(cum_ratio * subtree_width) - cum_width
                        remaining_width = subtree_width - cum_width
                        child_width = min(target_width, remaining_width)
                        this_children.append((child, child_width))
                        cum_width += child_width
                    start_padding = this_children[0][1] // 2          # Midpoint of first child
                    end_padding = subtree_width - (this_children[-1][1] // 2)  # ..of last child
                    this_output = ''.join(
                        '_' if start_padding < i < end_padding and v == ' ' else v
                        for i, v in enumerate(this_output))
                depth_output += this_output
                depth_children += this_children
            last_children = depth_children
            output += depth_output.rstrip() + '\n'
        return output

    def short_label(self, max_len=4):
        """Return the label as a string of at most max_len characters"""
        if self.node_type == 'constant':
            return f'{self.label:.{max(max_len - 2, 1)}g}'[:max_len]
        return str(self.label)[:max_len]

    #++++++++++++++++++++++++++++
    #   Query                   |
    #++++++++++++++++++++++++++++

    # Trees have no depth limit, so traversals use an explicit stack.

    def iter_nodes(self):
        """Yield all nodes in depth-first (pre-order) sequence, self first"""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_postorder(self):
        """Yield all nodes with every child before its parent"""
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded or not node.children:
                yield node
            else:
                stack.append((node, True))
                stack.extend((c, False) for c in reversed(node.children))

    @property
    def depth(self):
        """Return max distance to terminal (bottom) node"""
        max_depth = 0
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            max_depth = max(max_depth, depth)
            stack.extend((c, depth + 1) for c in node.children)
        return max_depth

    @property
    def size(self):
        """Return the total number of nodes in subtree, including self"""
        return sum(1 for _ in self.iter_nodes())

    @property
    def n_cols(self):
        """Return max node-width of entire subtree, i.e. number of leaves"""
        return sum(1 for node in self.iter_nodes() if not node.children)

    #++++++++++++++++++++++++++++
    #   Index                   |
    #++++++++++++++++++++++++++++

    def get_child(self, n):
        """Return the node in the nth position of a depth-first traversal"""
        if n >= 0:
            for i, node in enumerate(self.iter_nodes()):
                if i == n:
                    return node
        raise ValueError(f'Index "{n}" out of range ({self.size})')

    def set_child(self, n, node):
        """Return a copy with the nth node (dfs) replaced by supplied node

        Ancestors of the replaced node are rebuilt, all other subtrees are
        shared with self, which is left unchanged.
        """
        # Each stack item is (node, link), where link is (parent item, index
        # of node among the parent's children), or None for self.
        stack = [(self, None)]
        i = 0
        while stack:
            item = stack.pop()
            if i == n:
                break
            i += 1
            parent = item[0]
            for j in reversed(range(len(parent.children))):
                stack.append((parent.children[j], (item, j)))
        else:
            raise ValueError(f'Index "{n}" out of range ({self.size})')

        # Rebuild the path from the replaced node up to the root
        replaced, link = node, item[1]
        while link is not None:
            (parent, parent_link), j = link
            children = parent.children[:j] + (replaced,) + parent.children[j+1:]
            replaced, link = Node(parent.node_data, children), parent_link
        return replaced

    #++++++++++++++++++++++++++++
    #   Predict                 |
    #++++++++++++++++++++++++++++

    def predict(self, X):
        """Calculate and return the result of the tree on some data

        X is a 1-d array of input values, substituted for the variable.
        Children are evaluated before their parent, on a stack of results.
        """
        results = []
        with np.errstate(over='ignore', invalid='ignore'):
            for node in self.iter_postorder():
                if node.node_type == 'terminal':
                    results.append(np.asarray(X, dtype=np.float64))
                elif node.node_type == 'constant':
                    results.append(np.full(np.shape(X), node.label,
                                           dtype=np.float64))
                else:
                    args = results[len(results) - node.arity:]
                    del results[len(results) - node.arity:]
                    results.append(node.numpy_func(*args))
        return results[0]
