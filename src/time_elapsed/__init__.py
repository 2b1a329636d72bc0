"""time_elapsed - Named benchmarks with checkpoints and automatic units."""

from .timer import Benchmark, Status, Emphasis, start, timed
from .units import Unit, unit_of, units_of, to_unit, to_units, humanize, humanize_pair

__all__ = ['Benchmark', 'Status', 'Emphasis', 'start', 'timed',
           'Unit', 'unit_of', 'units_of', 'to_unit', 'to_units', 'humanize', 'humanize_pair']
__version__ = '0.1.0'
