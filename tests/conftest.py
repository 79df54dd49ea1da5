"""
Pytest configuration and fixtures
"""

import os
import random

# Plots are written to files only
os.environ.setdefault('MPLBACKEND', 'Agg')

import pytest


class FixedRng:
    """Always picks the first candidate and returns the same random value."""

    def __init__(self, value=0.0):
        self.value = value

    def choice(self, seq):
        return seq[0]

    def random(self):
        return self.value


@pytest.fixture
def rng():
    """Seeded random source for deterministic spawning"""
    return random.Random(1234)


@pytest.fixture
def fixed_rng():
    """Spawns a 2 in the first empty cell (row-major)"""
    return FixedRng(0.0)


@pytest.fixture
def storage_path(tmp_path):
    """Path of an isolated storage file"""
    return str(tmp_path / 'data' / 'storage.json')
