"""Simulation: parameter file, realisation loop and report."""

from lasfield.simulation.settings import FieldSettings, SimulationSettings, read_input_file
from lasfield.simulation.runner import RealizationStatistics, SimulationResult, run_simulation
from lasfield.simulation.report import write_report

__all__ = [
    "FieldSettings",
    "SimulationSettings",
    "read_input_file",
    "RealizationStatistics",
    "SimulationResult",
    "run_simulation",
    "write_report",
]
