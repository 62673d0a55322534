import numpy as np

from .tree import Tree

class Population:

    def __init__(self, model, trees, gen_id=0):
        """An ordered group of trees; sorted by error once evaluated"""
        self.model = model
        self.trees = trees
        self.gen_id = gen_id
        self.evaluated = False

    @classmethod
    def generate(cls, model=None, tree_pop_max=100, tree_depth_base=2):
        """Return a new Population of random (grow) trees"""
        trees = []
        for i in range(tree_pop_max):
            trees.append(Tree.generate(i+1, tree_depth_base,
                                       get_nodes=model.get_nodes,
                                       rng=model.rng,
                                       constant_range=model.constant_range))
        return cls(model, trees)

    def fittest(self):
        """Return the fittest tree of the population."""
        if not self.evaluated:
            raise ValueError('Population has not been evaluated yet')
        return self.trees[0]

    def median(self):
        """Return the tree at the middle rank of the population"""
        if not self.evaluated:
            raise ValueError('Population has not been evaluated yet')
        return self.trees[len(self.trees) // 2]

    def mean_size(self):
        """Return the average number of nodes per tree"""
        return float(np.mean([tree.size for tree in self.trees]))

    def evaluate(self, X, y):
        """Score all trees; use cached (by raw expression) or calculate

        Uses model methods .tree_predict and .calculate_score and manages
        the model cache, then sorts the trees by error.
        """
        self.model.log(f'\nEvaluate all Trees in Generation {self.gen_id}',
                       display=['i'])
        cache = self.model.cache_
        current = set()
        for tree in self.trees:
            expr = tree.raw_expression
            current.add(expr)
            if cache is not None and expr in cache:
                tree.score, tree.is_unfit = cache[expr]
            else:
                self.model.tree_error(tree, X, y)
                if cache is not None:
                    cache[expr] = (tree.score, tree.is_unfit)
            self.model.log(f'Tree {tree.id} yields (raw): {expr} '
                           f'with error: {tree.fitness}', display=['i'])
        if cache is not None:
            # Keep only expressions of this generation; reproduced trees of
            # the next one are looked up here
            for expr in [e for e in cache if e not in current]:
                del cache[expr]
        self.sort_by_error()
        self.evaluated = True

    def sort_by_error(self):
        """Order trees by ascending error (stored, not recomputed)"""
        self.trees = sorted(self.trees, key=lambda tree: tree.fitness)
        for i, tree in enumerate(self.trees, start=1):
            tree.id = i
        return self.trees

    def evolve(self, tree_pop_max, tourn_size=7, evolve_mutate=0.5,
               evolve_cross=0.25, evolve_repro=0.25, mutate_depth=2):
        """Return a new population evolved from self"""
        log = self.model.log
        rng = self.model.rng
        get_nodes = self.model.get_nodes
        constant_range = self.model.constant_range
        log(f'\nEvolve a population for Generation {self.gen_id + 1} ...',
            display=['i', 'db'])

        # Calculate number of new trees per evolution type
        evolve_ratios = dict(mutate=evolve_mutate, cross=evolve_cross,
                             repro=evolve_repro)
        if not np.isclose(sum(evolve_ratios.values()), 1.0):
            raise ValueError('Evolution parameters must sum to 1')
        # Floor mutation and crossover; the remainder is reproduced so that
        # the new population has exactly tree_pop_max trees.
        evolve_amounts = dict(mutate=int(evolve_mutate * tree_pop_max),
                              cross=int(evolve_cross * tree_pop_max))
        evolve_amounts['repro'] = tree_pop_max - sum(evolve_amounts.values())

        next_gen_trees = []
        for evolve_type, amount in evolve_amounts.items():
            verb = dict(repro='Reproductions', mutate='Mutations',
                        cross='Crossovers')
            log(f'\nPerform {amount} {verb[evolve_type]} ...', display=['i'])
            for _ in range(amount):
                parent = self.tournament(rng, tourn_size)
                next_id = len(next_gen_trees) + 1
                # Mutate: replace a random subtree with a new random subtree
                if evolve_type == 'mutate':
                    offspring = parent.mutate(rng, get_nodes, mutate_depth,
                                              constant_range, log, next_id)
                # Crossover: replace a random subtree with one from a mate
                elif evolve_type == 'cross':
                    mate = self.tournament(rng, tourn_size)
                    offspring = parent.crossover(mate, rng, log, next_id)
                # Reproduce: add to new population as-is
                else:
                    offspring = parent.copy(id=next_id)
                next_gen_trees.append(offspring)

        # Return next generation as a Population
        return Population(model=self.model, trees=next_gen_trees,
                          gen_id=self.gen_id + 1)

    #++++++++++++++++++++++++++++
    #   Evolution               |
    #++++++++++++++++++++++++++++

    def tournament(self, rng, tournament_size=7):
        """Return the best of tournament_size trees drawn with replacement

        The population is sorted by error, so the smallest drawn index wins.
        A tournament the size of the population returns the fittest tree;
        larger ones still draw with replacement.
        """
        if not self.evaluated:
            raise ValueError('Cannot conduct tournament: population has not '
                             'been evaluated')
        n_trees = len(self.trees)
        if tournament_size == n_trees:
            i_winner = 0
        else:
            i_winner = int(np.min(rng.randint(0, n_trees, tournament_size)))
        winner = self.trees[i_winner]
        self.model.log(f'The winner of the tournament is Tree: {winner.id}',
                       display=['i'])
        return winner
