#!/bin/python3
# Evolvefn - Symbolic Regression of a function of one variable

'''
Without any command line arguments, Evolvefn evolves a function fitting
x**2 + x + 1, sampled from -1.0 to 1.0 in steps of 0.1, with a population of
1000 and no limit on the number of generations.

    $ python evolve-fn.py

If you include one or more arguments, they will override the default
values, as follows:

    -pop [10...10000]            number of trees in each generational population
    -gen [1...]                  maximum number of generations (default: no limit)
    -tor [1...pop]               number of trees selected for tournament
    -bas [0...10]                maximum Tree depth for initial population
    -mut [0...10]                maximum depth of subtrees added by mutation
    -evm [0.0...1.0]             decimal percent of pop generated through Mutation
    -evc [0.0...1.0]             decimal percent of pop generated through Crossover
    -evr [0.0...1.0]             decimal percent of pop generated through Reproduction
    -thr [0.0...]                error below which a Tree counts as a solution
    -fil [path]/[to]/[data].csv  an external dataset: target column 's', one input
    -rsd [int]                   seed for the random number generator
    -dsp [i,g,m,s,db]            display: (i)nteractive, (g)eneration, (m)inimal,
                                 (s)ilent or (d)e(b)ug

An example is given, as follows:

    $ python evolve-fn.py -pop 500 -gen 50 -rsd 1000
'''

import argparse

from evolvefn import __version__, SymbolicRegressor, target_data, load_data

ap = argparse.ArgumentParser(description=f'Evolvefn {__version__}')
ap.add_argument('-pop', action='store', dest='pop_max', type=int, default=1000,
                help='[10...10000] number of trees per generation')
ap.add_argument('-gen', action='store', dest='gen_max', type=int, default=None,
                help='[1...] maximum number of generations')
ap.add_argument('-tor', action='store', dest='tor_size', type=int, default=7,
                help='[1...pop] tournament size')
ap.add_argument('-bas', action='store', dest='depth_base', type=int, default=2,
                help='[0...10] maximum Tree depth for the initial population')
ap.add_argument('-mut', action='store', dest='depth_mutate', type=int, default=2,
                help='[0...10] maximum depth of subtrees added by mutation')
ap.add_argument('-evm', action='store', dest='evo_m', type=float, default=0.5,
                help='[0.0-1.0] decimal percent of pop generated '
                     'through Mutation')
ap.add_argument('-evc', action='store', dest='evo_c', type=float, default=0.25,
                help='[0.0-1.0] decimal percent of pop generated '
                     'through Crossover')
ap.add_argument('-evr', action='store', dest='evo_r', type=float, default=0.25,
                help='[0.0-1.0] decimal percent of pop generated '
                     'through Reproduction')
ap.add_argument('-thr', action='store', dest='threshold', type=float,
                default=0.1, help='error below which a Tree is a solution')
ap.add_argument('-fil', action='store', dest='filename', default='',
                help='/path/to_your/[data].csv')
ap.add_argument('-rsd', action='store', dest='seed', type=int, default=None,
                help='seed for the random number generator')
ap.add_argument('-dsp', action='store', dest='display', default='m',
                choices=['i', 'g', 'm', 's', 'db'],
                help='[i,g,m,s,db] display mode')

args = ap.parse_args()

#++++++++++++++++++++++++++++++++++++++++++
#   Load Data                             |
#++++++++++++++++++++++++++++++++++++++++++
if args.filename:
    terminal, X, y = load_data(args.filename)
else:
    terminal = 'x'
    X, y = target_data()

#++++++++++++++++++++++++++++++++++++++++++
#   Conduct the GP run                    |
#++++++++++++++++++++++++++++++++++++++++++
gp = SymbolicRegressor(
    tree_pop_max=args.pop_max,
    tree_depth_base=args.depth_base,
    mutate_depth=args.depth_mutate,
    tourn_size=args.tor_size,
    evolve_mutate=args.evo_m,
    evolve_cross=args.evo_c,
    evolve_repro=args.evo_r,
    threshold=args.threshold,
    gen_max=args.gen_max,
    display=args.display,
    random_state=args.seed,
    terminal=terminal,
)

try:
    gp.fit(X, y)
except KeyboardInterrupt:
    gp.log('\nRun interrupted')

if gp.population is not None and gp.population.evaluated:
    tree = gp.population.fittest()
    gp.log(f'\nTree {tree.id}'
           f'\n  yields (raw): {tree.raw_expression}'
           f'\n  yields (sym): {tree.expression}'
           f'\n  error: {tree.fitness}\n')
    gp.log(tree.display())
