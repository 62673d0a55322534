from .node import Node

class Tree:

    #++++++++++++++++++++++++++++
    #   Initialize              |
    #++++++++++++++++++++++++++++

    def __init__(self, id, root, score=None):
        """Initialize a Tree from an id and Node"""
        self.id = id        # The tree's position within population
        self.root = root    # The top Node (depth = 0), never modified
        self.score = score or {}

        # This flag designates a tree whose predictions overflow to 'inf' or
        # 'nan', e.g. '(x)*(x)' nested deeply enough. Such trees sort last.
        self.is_unfit = False

    @classmethod
    def load(cls, id, expr):
        if expr[0] != '(':
            raise ValueError(f'Load-from expressions must start with '
                             f'parenthesis; got {expr[0]!r}')
        return cls(id, Node.load(expr))

    #++++++++++++++++++++++++++++
    #   Generate Random         |
    #++++++++++++++++++++++++++++

    @classmethod
    def generate(cls, id=None, tree_depth_base=2, get_nodes=None, rng=None,
                 constant_range=(-5.0, 5.0)):
        """Generate a new Tree object given starting parameters."""
        root = Node.generate(rng, get_nodes, tree_depth_base, constant_range)
        return cls(id, root)

    def copy(self, id=None, include_score=False):
        """Return a duplicate; the root is immutable so it is shared"""
        return Tree(id if id is not None else self.id,
                    self.root,
                    dict(self.score) if include_score else None)

    #++++++++++++++++++++++++++++
    #   Display                 |
    #++++++++++++++++++++++++++++

    def __repr__(self):
        fit_repr = '' if self.fitness is None else f" fitness: {self.fitness}"
        expr = self.raw_expression
        if len(expr) > 16:
            expr = expr[:13] + "..."
        return f"<Tree {self.id}: '{expr}'{fit_repr}>"

    @property
    def raw_expression(self):
        """Return the raw (full) expression"""
        return self.root.parse()

    @property
    def expression(self):
        """Return the simplified expression"""
        return self.root.parse(simplified=True)

    def display(self, *args, **kwargs):
        """Return a printable string of all nodes"""
        return self.root.display(*args, **kwargs)

    #++++++++++++++++++++++++++++
    #   Query                   |
    #++++++++++++++++++++++++++++

    @property
    def depth(self):
        """Return the maximum depth (distance from root) of any node"""
        return self.root.depth

    @property
    def size(self):
        """Return the total number of nodes"""
        return self.root.size

    @property
    def fitness(self):
        """Return fitness or None if not yet evaluated"""
        fitness = self.score.get('fitness')
        return None if fitness is None else float(fitness)

    def normalize(self, point_index):
        """Map any integer onto a valid depth-first position"""
        return abs(int(point_index)) % self.size

    def get_child(self, point_index):
        """Return the subtree at a (normalized) depth-first position"""
        return self.root.get_child(self.normalize(point_index))

    def predict(self, X):
        """Return the output of the tree for each input value in X"""
        return self.root.predict(X)

    #++++++++++++++++++++++++++++
    #   Modify                  |
    #++++++++++++++++++++++++++++

    def set_child(self, point_index, node, id=None):
        """Return a new Tree with the subtree at point_index replaced"""
        root = self.root.set_child(self.normalize(point_index), node)
        return Tree(self.id if id is None else id, root)

    def mutate(self, rng, get_nodes, mutate_depth=2,
               constant_range=(-5.0, 5.0), log=None, id=None):
        """Return a new Tree with a random subtree replaced by a new one"""
        i_mutate = rng.randint(0, self.size)
        replacement = Node.generate(rng, get_nodes, mutate_depth,
                                    constant_range)
        offspring = self.set_child(i_mutate, replacement, id)
        if log is not None:
            log(f'Tree {self.id}: node {i_mutate} '
                f'{self.get_child(i_mutate).parse()} mutated to '
                f'{replacement.parse()}', display=['db'])
        return offspring

    def crossover(self, mate, rng, log=None, id=None):
        """Return a new Tree with a random node replaced by one from mate"""
        i_self = rng.randint(0, self.size)
        i_mate = rng.randint(0, mate.size)
        to_insert = mate.get_child(i_mate)
        offspring = self.set_child(i_self, to_insert, id)
        if log is not None:
            log(f'In a copy of Tree {self.id} we replace node {i_self}: '
                f'{self.get_child(i_self).parse()} with node {i_mate} from '
                f'Tree {mate.id}: {to_insert.parse()}. The resulting '
                f'offspring is: {offspring.raw_expression}', display=['db'])
        return offspring
