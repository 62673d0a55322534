import pytest
import numpy as np

from evolvefn import (SymbolicRegressor, Tree, target_data, absolute_error,
                      evolve)

@pytest.fixture
def default_kwargs():
    return dict(
        tree_pop_max=50,
        tree_depth_base=2,
        mutate_depth=2,
        tourn_size=7,
        evolve_mutate=0.5,
        evolve_cross=0.25,
        evolve_repro=0.25,
        threshold=0.1,
        gen_max=3,
        display='s',
        random_state=1000,
    )

def test_model_params(default_kwargs):
    model = SymbolicRegressor(**default_kwargs)
    # Check all kwargs loaded correctly
    for k, v in default_kwargs.items():
        assert getattr(model, k) == v
    assert model.get_params()['tree_pop_max'] == 50  # sklearn convention
    assert model.population is None  # Nothing happens until fit

def test_model_check(default_kwargs):
    model = SymbolicRegressor(**default_kwargs)
    model.check_model()
    assert [n.label for n in model.nodes] == ['x', '+', '-', '*', '/']
    assert [n.label for n in model.get_nodes(['terminal'])] == ['x']
    assert len(model.get_nodes(['operator'], arity=2)) == 4
    assert set(model.scoring_) == {'fitness', 'mean_squared_error'}
    assert model.cache_ == {}
    assert all(v == [] for v in model.history_.values())

    model = SymbolicRegressor(functions=['*'], terminal='t', cache=False)
    model.check_model()
    assert [n.label for n in model.nodes] == ['t', '*']
    assert model.cache_ is None

@pytest.mark.parametrize('bad_kwargs', [
    dict(display='x'),
    dict(tree_pop_max=0),
    dict(tourn_size=0),
    dict(gen_max=-1),
    dict(evolve_mutate=0.5, evolve_cross=0.5, evolve_repro=0.5),
    dict(constant_range=(1.0, -1.0)),
    dict(terminal='1x'),
    dict(terminal='lambda'),
    dict(functions=['+', '**']),
    dict(functions=[]),
])
def test_model_check_errors(bad_kwargs):
    model = SymbolicRegressor(**bad_kwargs)
    with pytest.raises(ValueError):
        model.check_model()

def test_absolute_error():
    assert absolute_error([1.0, 2.0, 3.0], [1.5, 2.0, 1.0]) == 2.5
    assert absolute_error(np.zeros(4), np.zeros(4)) == 0.0

def test_tree_error(default_kwargs):
    model = SymbolicRegressor(**default_kwargs)
    model.check_model()
    tree = Tree.load(1, '(1.0)')
    assert model.tree_error(tree, np.array([0.0]), np.array([1.0])) == 0.0
    assert not tree.is_unfit
    assert tree.score['mean_squared_error'] == 0.0

    X, y = target_data()
    tree = Tree.load(2, '(x)')
    error = model.tree_error(tree, X, y)
    assert error == pytest.approx(absolute_error(y, X))
    assert tree.fitness == error

def test_tree_error_unfit(default_kwargs):
    model = SymbolicRegressor(**default_kwargs)
    model.check_model()
    tree = Tree.load(1, '((((x)*(x))*((x)*(x)))-(((x)*(x))*((x)*(x))))')
    error = model.tree_error(tree, np.array([1e200]), np.array([0.0]))
    assert error == float('inf')
    assert tree.is_unfit

def test_fit_gen_max(default_kwargs):
    kwargs = dict(default_kwargs, threshold=-1.0)  # Never succeeds
    model = SymbolicRegressor(**kwargs).fit()
    assert not model.success_
    assert model.solution_ is None
    assert model.population.gen_id == 3
    # One history entry per generation, including the initial one
    assert model.history_['generation'] == [0, 1, 2, 3]
    for values in model.history_.values():
        assert len(values) == 4
    assert len(model.population.trees) == 50

def test_fit_gen_max_zero(default_kwargs):
    kwargs = dict(default_kwargs, threshold=-1.0, gen_max=0)
    model = SymbolicRegressor(**kwargs).fit()
    assert model.population.gen_id == 0
    assert model.history_['generation'] == [0]

def test_fit_success(default_kwargs):
    X = np.arange(-1.0, 1.0, 0.1)
    model = SymbolicRegressor(**dict(default_kwargs, gen_max=20))
    model.fit(X, X)
    assert model.success_
    assert model.solution_ is model.population.fittest()
    assert model.solution_.fitness < model.threshold
    assert np.allclose(model.predict(X), X, atol=0.1)
    assert model.score(X, X) > 0.99  # sklearn R^2

def test_predict_before_fit():
    with pytest.raises(ValueError):
        SymbolicRegressor().predict([0.0, 1.0])

def test_fit_reproducible(default_kwargs):
    kwargs = dict(default_kwargs, threshold=-1.0, gen_max=2)
    a = SymbolicRegressor(**kwargs).fit()
    b = SymbolicRegressor(**kwargs).fit()
    assert a.history_ == b.history_

def test_check_data(default_kwargs):
    model = SymbolicRegressor(**default_kwargs)
    X, y = model.check_data([[1], [2], [3]], [2, 4, 6])
    assert X.shape == y.shape == (3,)
    with pytest.raises(ValueError):
        model.check_data([1.0, 2.0], [1.0])

def test_evolve():
    model = evolve(30, gen_max=2, display='s', random_state=1000)
    assert isinstance(model, SymbolicRegressor)
    assert model.tree_pop_max == 30
    assert model.population.gen_id <= 2
    assert len(model.history_['generation']) == model.population.gen_id + 1

@pytest.mark.parametrize('display', ['s', 'm', 'g'])
def test_display(default_kwargs, capsys, display):
    kwargs = dict(default_kwargs, threshold=-1.0, gen_max=1, display=display)
    model = SymbolicRegressor(**kwargs).fit()
    out = capsys.readouterr().out
    if display == 's':
        assert out == ''
    else:
        assert 'Generation: 0' in out
        assert 'Generation: 1' in out
        assert 'Best program:' in out
        assert 'No solution found' in out
        best = model.population.fittest()
        assert (best.display() in out) == (display == 'g')

def test_fit_improves():
    """Across seeds, evolution lowers the best error of the first generation"""
    first, last = [], []
    for seed in range(5):
        model = SymbolicRegressor(tree_pop_max=100, gen_max=10, display='s',
                                  random_state=seed).fit()
        first.append(model.history_['best_error'][0])
        last.append(model.history_['best_error'][-1])
    assert sum(last) < sum(first)

@pytest.mark.parametrize('terminal', ['N', 'S', 'E', 'pi'])
def test_fit_variable_names(terminal, capsys):
    """Variables named like sympy objects still print as variables"""
    X, y = target_data()
    model = SymbolicRegressor(tree_pop_max=20, gen_max=1, random_state=1,
                              terminal=terminal, display='m').fit(X, y)
    best = model.population.fittest()
    assert best.expression in capsys.readouterr().out
    assert 'exp' not in best.expression
