# Evolvefn Base Class
# Define the methods and global variables used by Evolvefn

import keyword

import numpy as np
import sklearn.metrics as skm

from sklearn.utils import check_random_state, check_X_y
from sklearn.base import BaseEstimator, RegressorMixin

from .node_lib import NodeData, get_function_node, get_nodes
from .population import Population
from .data import target_data


class SymbolicRegressor(RegressorMixin, BaseEstimator):

    """
    Evolve an expression of one variable that fits sample (x, y) pairs.

    SymbolicRegressor
    ├─ .scoring_ = {field: func...}     - funcs are passed (y_true, y_pred)
    ├─ .nodes = [NodeData...]           - the variable and active operators
    ├─ .get_nodes(types, arity)         - return nodes matching types & arity
    │
    ├─ .population = Population         - the current generation of trees
    │   ├─ .trees                       - list of Trees, sorted by error
    │   │   └─ Tree                     - an evolvable expression tree
    │   │      ├─ .score                - a dict of results matching `scoring_`
    │   │      ├─ .root = Node          - an immutable recursive node
    │   │      │   ├─ .label            - a variable ('x'), constant or '*'
    │   │      │   └─ .children         - the nodes immediately below
    │   │      └─ mutate, crossover     - return new Trees
    │   │
    │   ├─ .evaluate(X, y)              - score and sort trees
    │   ├─ .tournament(rng, size)       - select a parent
    │   └─ .evolve()                    - return a new generation of trees
    │
    ├─ .fit(X, y)                       - evolve until error < threshold
    ├─ .predict(X)                      - return predicted y values for X
    └─ .score(X, y)                     - R^2 of the fittest tree (sklearn)

    Absolute error is the fitness function: the sum of the absolute difference
    between the prediction and actual for every sample. Lower is better.
    """

    # Fit parameters (set later)
    rng = None
    scoring_ = None
    history_ = None
    nodes = None
    population = None
    cache_ = None
    solution_ = None
    success_ = None

    def __init__(
        self, tree_pop_max=1000, tree_depth_base=2, mutate_depth=2,
        tourn_size=7, evolve_mutate=0.5, evolve_cross=0.25, evolve_repro=0.25,
        threshold=0.1, gen_max=None, display='m', random_state=None,
        functions=None, terminal='x', constant_range=(-5.0, 5.0), cache=True):
        """Initialize an Evolvefn model with given parameters"""

        # Model parameters
        self.tree_pop_max = tree_pop_max     # number of trees per generation
        self.tree_depth_base = tree_depth_base # depth of initial population
        self.mutate_depth = mutate_depth     # depth of subtrees from mutation
        self.tourn_size = tourn_size         # number of Trees per tournament
        self.evolve_mutate = evolve_mutate   # ratio of next_gen mutated
        self.evolve_cross = evolve_cross     # ratio of next_gen made by crossover
        self.evolve_repro = evolve_repro     # ratio of next_gen reproduced
        self.threshold = threshold           # error below which fit succeeds
        self.gen_max = gen_max               # max generations; None = no limit
        self.display = display               # determines when log prints
        self.random_state = random_state     # follows sklearn convention
        self.functions = functions           # list of operators to use
        self.terminal = terminal             # label of the input variable
        self.constant_range = constant_range # [low, high) of random constants
        self.cache = cache                   # reuse scores of equal trees

    def log(self, msg, display={'i', 'g', 'm', 'db'}):
        """Print a message to the console when in specified display mode"""
        if self.display in display or display == 'all':
            print(msg)

    #+++++++++++++++++++++++++++++++++++++++++++++
    #   'Check' Functions                        |
    #+++++++++++++++++++++++++++++++++++++++++++++

    # Following the sklearn convention, fit(X, y) validates all model
    # attributes passed to __init__ and/or updated manually, as well as X and
    # y. check_X_y is used for the data, the rest is packaged below.

    def check_model(self):
        """Initialize and/or validate model parameters"""
        self.rng = check_random_state(self.random_state)
        self.scoring_ = dict(fitness=absolute_error,
                             mean_squared_error=skm.mean_squared_error)
        self.history_ = dict(generation=[], best_error=[], median_error=[],
                             mean_size=[], best_program=[],
                             mean_squared_error=[])
        self.cache_ = {} if self.cache else None

        if self.display not in ('i', 'g', 'm', 's', 'db'):
            raise ValueError(f'Unrecognized display mode: {self.display}')
        if int(self.tree_pop_max) < 1:
            raise ValueError(f'tree_pop_max must be positive, got '
                             f'{self.tree_pop_max}')
        if int(self.tourn_size) < 1:
            raise ValueError(f'tourn_size must be positive, got '
                             f'{self.tourn_size}')
        if self.gen_max is not None and int(self.gen_max) < 0:
            raise ValueError(f'gen_max must be None or >= 0, got '
                             f'{self.gen_max}')
        ratios = (self.evolve_mutate, self.evolve_cross, self.evolve_repro)
        if not np.isclose(sum(ratios), 1.0):
            raise ValueError('Evolution parameters must sum to 1')
        low, high = self.constant_range
        if not low < high:
            raise ValueError(f'constant_range must be (low, high), got '
                             f'{self.constant_range}')

        # Nodes
        if (not isinstance(self.terminal, str) or
            not self.terminal.isidentifier() or
            keyword.iskeyword(self.terminal)):
            raise ValueError(f'Terminal must be a non-keyword identifier, got '
                             f'{self.terminal!r}')
        function_labels = (['+', '-', '*', '/'] if self.functions is None
                           else list(self.functions))
        if not function_labels:
            raise ValueError('At least one operator is required')
        functions = [get_function_node(f) for f in function_labels]
        self.nodes = [NodeData(self.terminal, 'terminal')] + functions

    def get_nodes(self, *args, **kwargs):
        """Returns a subset of self.nodes based on node_types and arity"""
        return get_nodes(*args, **kwargs, lib=self.nodes)

    #+++++++++++++++++++++++++++++++++++++++++++++
    #   Methods to Run Evolvefn                  |
    #+++++++++++++++++++++++++++++++++++++++++++++

    def fit(self, X=None, y=None):
        """Evolve a population of trees until one fits X and y

        Without data, fit the default target (x**2 + x + 1 over [-1, 1)).
        """
        self.check_model()
        if X is None and y is None:
            X, y = target_data()
        X, y = self.check_data(X, y)

        self.population = Population.generate(
            model=self,
            tree_pop_max=self.tree_pop_max,
            tree_depth_base=self.tree_depth_base,
        )
        self.log(f'Starting evolution with a population of '
                 f'{self.tree_pop_max} Trees ...')
        self.population.evaluate(X, y)
        self.log_generation()

        self.solution_ = None
        while True:
            best = self.population.fittest()
            if best.fitness < self.threshold:  # good enough to count as success
                self.solution_ = best
                self.log(f'Success: {best.expression}')
                break
            if (self.gen_max is not None and
                self.population.gen_id >= self.gen_max):
                self.log(f'No solution found in {self.population.gen_id} '
                         f'generations; best error: {best.fitness}')
                break

            # Evolve and evaluate the next generation
            self.population = self.population.evolve(
                self.tree_pop_max,
                self.tourn_size,
                self.evolve_mutate,
                self.evolve_cross,
                self.evolve_repro,
                self.mutate_depth,
            )
            self.population.evaluate(X, y)
            self.log_generation()

        self.success_ = self.solution_ is not None
        return self

    def check_data(self, X, y):
        """Validate samples; X is one input value per sample"""
        X, y = check_X_y(np.reshape(np.asarray(X, dtype=np.float64), (-1, 1)),
                         y, y_numeric=True)
        return X[:, 0], y.astype(np.float64)

    def log_generation(self):
        """Report the current generation and add it to history"""
        population = self.population
        best, median = population.fittest(), population.median()
        entry = dict(
            generation=population.gen_id,
            best_error=best.fitness,
            median_error=median.fitness,
            mean_size=population.mean_size(),
            best_program=best.raw_expression,
            mean_squared_error=best.score.get('mean_squared_error',
                                              float('inf')),
        )
        for k, v in entry.items():
            self.history_[k].append(v)
        self.log('======================')
        self.log(f'Generation: {entry["generation"]}')
        self.log(f'Best error: {entry["best_error"]}')
        self.log(f'Best program: {best.expression}')
        self.log(f'     Median error: {entry["median_error"]}')
        self.log(f'     Average program size: {entry["mean_size"]}')
        self.log(f'\n{best.display()}', display=['g', 'db'])

    def predict(self, X):
        """Return predicted y values for X using the fittest tree"""
        if self.population is None:
            raise ValueError('Model has not been fit yet')
        X = np.asarray(X, dtype=np.float64).ravel()
        return self.tree_predict(self.population.fittest(), X)

    def tree_predict(self, tree, X):
        """Return predicted values for y given X for a single tree"""
        return tree.predict(X)

    def calculate_score(self, y_pred, y_true):
        """Return a dict with the results of each scoring function"""
        return {label: float(fx(y_true, y_pred))
                for label, fx in self.scoring_.items()}

    def tree_error(self, tree, X, y):
        """Score a single tree on X and y and return its error

        Trees whose output is not finite are marked unfit with infinite
        error, so they sort behind every fit tree.
        """
        y_pred = self.tree_predict(tree, X)
        tree.is_unfit = not np.all(np.isfinite(y_pred))
        if tree.is_unfit:
            tree.score = dict(fitness=float('inf'))
        else:
            tree.score = self.calculate_score(y_pred, y)
        return tree.fitness


def absolute_error(y_true, y_pred):
    """Default regression fitness: sum of absolute differences"""
    return float(np.sum(np.abs(np.asarray(y_true) - np.asarray(y_pred))))


def evolve(tree_pop_max, X=None, y=None, **kwargs):
    """Evolve a solution with a population of tree_pop_max; return the model

    X and y default to the quadratic target data. Other keyword arguments
    are passed to SymbolicRegressor, e.g. gen_max to bound the run.
    """
    model = SymbolicRegressor(tree_pop_max=tree_pop_max, **kwargs)
    return model.fit(X, y)
