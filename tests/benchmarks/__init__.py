"""Mediator dispatch benchmarks (pytest-benchmark).

Not part of the default ``testpaths``; run explicitly::

    pytest tests/benchmarks/ --benchmark-sort=median
    pytest tests/benchmarks/ --benchmark-disable   # functional check only
"""
