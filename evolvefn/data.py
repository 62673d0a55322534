"""
Sample Data

Evolvefn fits a function of one variable to (x, y) sample pairs. The default
target is x**2 + x + 1 (the problem from chapter 4 of the GP Field Guide)
with x counting up from -1.0 in increments of 0.1 while below 1.0. The
increments accumulate in floating point, so the last of the 21 samples is
0.9999999999999999. Samples of your own can be loaded from a csv file
instead.
"""

import numpy as np
import pandas as pd


def quadratic(x):
    return x * x + x + 1

def target_data(func=None, start=-1.0, stop=1.0, step=0.1):
    """Return inputs and outputs of func sampled over [start, stop)

    Inputs are start, start + step, start + step + step, ... while below
    stop, with the step added repeatedly rather than multiplied.
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    func = quadratic if func is None else func
    inputs = []
    x = start
    while x < stop:
        inputs.append(x)
        x += step
    X = np.array(inputs, dtype=np.float64)
    return X, np.asarray(func(X), dtype=np.float64)

def load_data(path, target='s'):
    """Return the variable label, X and y from a csv file

    The csv must have a header row, a target column (default 's') and
    exactly one other column, whose name becomes the variable label.
    """
    dataset = pd.read_csv(path)
    if target not in dataset.columns:
        raise ValueError(f'Target column {target!r} not found in {path}')
    y = dataset.pop(target)
    if len(dataset.columns) != 1:
        raise ValueError(f'Expected exactly one input column besides '
                         f'{target!r}, got {list(dataset.columns)}')
    terminal = str(dataset.columns[0])
    X = dataset[terminal]
    return terminal, X.to_numpy(dtype=np.float64), y.to_numpy(dtype=np.float64)
