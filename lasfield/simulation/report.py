"""Plain-text report of a simulation run.

Functions
---------
write_report
    Write inputs, per-realisation checks and summary statistics.
"""

from __future__ import annotations

import math
from datetime import datetime
from pathlib import Path

from lasfield import __version__
from lasfield.simulation.runner import SimulationResult

RULE = "-" * 66


def _input_lines(result: SimulationResult) -> list[str]:
    s = result.settings
    d1 = s.field1.distribution
    d2 = s.field2.distribution
    return [
        "Input Parameter:",
        RULE,
        f"Distribution of random field 1 . . . . . . . . {d1.name}",
        f"Mean and SD of random field 1  . . . . . . . . {d1.mean:5.3e} {d1.std:5.3e}",
        f"Distribution of random field 2 . . . . . . . . {d2.name}",
        f"Mean and SD of random field 2  . . . . . . . . {d2.mean:5.3e} {d2.std:5.3e}",
        f"Correlation lengths in x- and y-dir  . . . . . {s.theta_x:5.3e} {s.theta_y:5.3e}",
        f"Cross-correlation between the two RFs  . . . . {s.cross_correlation:5.3e}",
        f"Element sizes in x- and y-dir  . . . . . . . . {s.dx:5.3e} {s.dy:5.3e}",
        f"Number of elements in x- and y-dir . . . . . . {s.nxe} {s.nye}",
        f"Generated field size in x- and y-dir . . . . . "
        f"{result.generated_shape[0]} {result.generated_shape[1]}",
        f"Initial seed number  . . . . . . . . . . . . . {s.seed}",
        f"Total number of realizations   . . . . . . . . {s.n_realizations}",
    ]


def _realization_lines(result: SimulationResult) -> list[str]:
    lines = ["", "", "Realizations:", RULE]
    for st in result.statistics:
        lines.append(f"Realization {st.index}:")
        if math.isnan(st.cross_correlation):
            lines.append("    Corr coef between RFs is: N/A (one rf is det)")
        else:
            lines.append(f"    Corr coef between RFs is: {st.cross_correlation:3.2f}")
        lines.append(f"    Check random field #1: RF MEAN = {st.mean1:8.3f}, SD = {st.sd1:8.3f}")
        lines.append(f"    Check random field #2: RF MEAN = {st.mean2:8.3f}, SD = {st.sd2:8.3f}")
        lines.append("")
    return lines


def _statistics_lines(result: SimulationResult) -> list[str]:
    s = result.settings
    lines = ["", "", "Statistics:", RULE, f"Total Realizations:\t{s.n_realizations}"]
    summary = result.summary()
    if summary:
        d1 = s.field1.distribution
        d2 = s.field2.distribution
        lines += [
            "",
            f"MEAN of all RF1 MEANs:\t{summary['mean1']:7.5e} (actual {d1.mean:7.5e})",
            f"MEAN of all RF1 SDs:\t{summary['sd1']:7.5e} (actual {d1.std:7.5e})",
            f"MEAN of all RF2 MEANs:\t{summary['mean2']:7.5e} (actual {d2.mean:7.5e})",
            f"MEAN of all RF2 SDs:\t{summary['sd2']:7.5e} (actual {d2.std:7.5e})",
            f"MEAN of all crs-corr:\t{summary['cross_correlation']:7.5e} "
            f"(actual {s.cross_correlation:7.5e})",
        ]
    lines += ["", f"Total elapsed time:\t{result.elapsed:7.5e} sec."]
    return lines


def write_report(result: SimulationResult, filename: str | Path) -> Path:
    """Write a plain-text report of *result*.

    Per-realisation checks and averaged statistics are included only
    when the run collected them (debug mode).

    Args:
        result: Output of :func:`~lasfield.simulation.runner.run_simulation`.
        filename: Report path; overwritten if it exists.

    Returns:
        The report path.
    """
    path = Path(filename)
    stamp = datetime.now().astimezone().strftime("%d-%b-%Y  %H:%M:%S  %z")
    lines = [stamp, f"This is lasfield (Version {__version__})", RULE, ""]
    lines += _input_lines(result)
    if result.statistics:
        lines += _realization_lines(result)
    lines += _statistics_lines(result)
    path.write_text("\n".join(lines) + "\n")
    return path
