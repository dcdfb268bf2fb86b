"""Shared test configuration and fixtures."""

import pandas as pd
import pytest


@pytest.fixture
def cars_summary():
    """Descriptive statistics of the cars dataset with labelled rows."""
    return pd.DataFrame(
        {
            'Mean': [15.4, 42.98],
            'SD': [5.29, 25.77],
            'Min': [4.0, 2.0],
            'Max': [25.0, 120.0],
        },
        index=['speed', 'dist'],
    )


@pytest.fixture
def plain_table():
    """Four unlabelled rows with a text stub column."""
    return pd.DataFrame(
        {
            'Item': ['r1', 'r2', 'r3', 'r4'],
            'M': [1.0, 2.0, 3.0, 4.0],
            'SD': [0.5, 0.25, 0.125, 1.0],
        }
    )
