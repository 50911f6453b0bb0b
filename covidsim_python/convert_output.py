"""
Conversion of CovidSim severity output into the generalized model output.
"""

import io
import logging
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from . import config
from .model_input import ModelInput

logger = logging.getLogger(__name__)

SEVERITY_METRICS = [
    "Mild",
    "ILI",
    "SARI",
    "Critical",
    "CritRecov",
    "incDeath",
    "cumMild",
    "cumILI",
    "cumSARI",
    "cumCritical",
    "cumCritRecov",
]

SEVERITY_OUTPUT_FILENAME = "result.avNE.severity.xls"


def convert_output(
    model_input: ModelInput, tsv_content: str, t0: Optional[str] = None
) -> Dict[str, Any]:
    """
    Convert the averaged severity table written by CovidSim.

    Args:
        model_input: The input the run was made with, stored as metadata
        tsv_content: Contents of the ``.avNE.severity.xls`` file, which is
                     tab-separated text despite its extension
        t0: ISO date that timestamps count from (default ``config.DAY0``)

    Returns:
        Model output dictionary with ``metadata``, ``time`` and
        ``aggregate`` sections

    Raises:
        ValueError: If the table lacks the time column or a metric column
    """
    if t0 is None:
        t0 = config.DAY0

    df = pd.read_csv(io.StringIO(tsv_content), sep="\t")
    df.columns = [str(column).strip() for column in df.columns]

    missing = [c for c in ["t"] + SEVERITY_METRICS if c not in df.columns]
    if missing:
        raise ValueError(f"Severity output is missing columns: {missing}")

    timestamps = np.asarray(df["t"], dtype=float)
    metrics = {
        name: np.asarray(df[name], dtype=float).tolist() for name in SEVERITY_METRICS
    }

    extent = [float(timestamps[0]), float(timestamps[-1])] if len(timestamps) else []
    logger.debug("Converted %d severity rows", len(timestamps))

    return {
        "metadata": model_input.to_dict(),
        "time": {
            "t0": t0,
            "timestamps": timestamps.tolist(),
            "extent": extent,
        },
        "aggregate": {"metrics": metrics},
    }
