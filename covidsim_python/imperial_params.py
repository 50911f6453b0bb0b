"""
Translation of generalized model parameters into CovidSim parameter values.

Each ``assign_*`` function mutates a parsed parameter document in place:

* ``assign_pre_parameters`` fills in the alert trigger of the pre-parameter
  file,
* ``assign_parameters`` encodes the intervention schedule as CovidSim's
  time-varying efficacies,
* ``assign_admin_parameters`` restricts an admin unit file to a single
  subregion.
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

from . import config
from .errors import FormatError, NotFoundError
from .model_input import Intensity, InterventionLevel, ModelParameters
from .params_serialization import ParameterDocument

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime]

DAY0 = config.DAY0

# A duration long enough to cover the whole simulation.
POLICY_DURATION = 10000

ALERT_ACCUMULATION_DAYS = 1000

# Time-varying efficacies that are not overridden but must have one value
# per intervention period.
LEGACY_TIME_VARYING_KEYS = [
    "Relative household contact rates over time after place closure",
    "Relative spatial contact rates over time after place closure",
    "Relative household contact rates over time after quarantine",
    "Residual place contacts over time after household quarantine by place type",
    "Residual spatial contacts over time after household quarantine",
    "Household level compliance with quarantine over time",
    "Individual level compliance with quarantine over time",
    "Residual contacts after case isolation over time",
    "Residual household contacts after case isolation over time",
    "Proportion of detected cases isolated over time",
    "Relative place contact rates over time given social distancing by place type",
    "Relative household contact rates over time given social distancing",
    "Relative spatial contact rates over time given social distancing",
]

# Adaptive triggers are not supported, the "after change" parameters are
# deprecated, and the "enhanced" family (shielding of the vulnerable) is
# unused. All of them are zeroed.
UNSUPPORTED_PARAMETER_FAMILIES = [
    "trigger incidence",
    "after change",
    "incidence threshold",
    "enhanced",
]

INTERVENTION_LEVELS = [
    "case isolation",
    "household quarantine",
    "social distancing",
    "place closure",
]

INTENSITY_PROPORTIONS = {
    Intensity.MILD: 0.5,
    Intensity.MODERATE: 0.75,
    Intensity.AGGRESSIVE: 0.9,
}

ADMIN_UNITS_KEY = "Codes and country/province names for admin units"


def date_from_api(value: DateLike) -> datetime:
    """
    Convert an ISO-8601 date or datetime into a UTC datetime.

    Naive values are taken to be UTC already.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_between(t0: DateLike, t1: DateLike) -> int:
    """Whole days from ``t0`` to ``t1``, truncated toward zero."""
    delta = date_from_api(t1) - date_from_api(t0)
    return int(delta.total_seconds() / 86400)


def assign_pre_parameters(
    params: ParameterDocument,
    model_parameters: ModelParameters,
    day0: Optional[DateLike] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Set the alert trigger parameters of a pre-parameter document.

    Args:
        params: Parsed pre-parameter template, modified in place
        model_parameters: Calibration data and intervention schedule
        day0: Reference date for "day of year" values (default ``DAY0``)
        now: Used as the intervention start when there are no periods
             (default: the current UTC time)
    """
    if day0 is None:
        day0 = DAY0

    periods = model_parameters.intervention_periods
    if periods:
        intervention_start = date_from_api(periods[0].start_date)
    else:
        intervention_start = now if now is not None else datetime.now(timezone.utc)

    calibration_days = days_between(day0, model_parameters.calibration_date)
    intervention_start_days = days_between(day0, intervention_start)

    params["Day of year trigger is reached"] = calibration_days
    params[
        "Number of days to accummulate cases/deaths before alert"
    ] = ALERT_ACCUMULATION_DAYS
    params[
        "Number of deaths accummulated before alert"
    ] = model_parameters.calibration_death_count
    params["Trigger alert on deaths"] = 1

    params["Day of year interventions start"] = intervention_start_days

    # When calibration happens before interventions start, the alert must not
    # wait for the interventions.
    params["Alert trigger starts after interventions"] = (
        1 if calibration_days >= intervention_start_days else 0
    )

    params["Treatment trigger incidence per cell"] = 0

    logger.debug(
        "Pre-parameters: trigger day %s, interventions start day %s",
        calibration_days,
        intervention_start_days,
    )


def assign_parameters(
    params: ParameterDocument, model_parameters: ModelParameters
) -> None:
    """
    Encode the intervention schedule as time-varying CovidSim parameters.

    Does nothing when there are no intervention periods.

    Args:
        params: Parsed parameter template, modified in place
        model_parameters: Calibration data and intervention schedule

    Raises:
        FormatError: If a time-varying parameter in the template is not a
                     non-empty array
    """
    periods = model_parameters.intervention_periods
    period_count = len(periods)
    if period_count == 0:
        return

    params["Vary efficacies over time"] = 1

    # Any time-varying efficacy we don't override needs one value per period.
    for key in LEGACY_TIME_VARYING_KEYS:
        if key in params:
            params[key] = normalize_length(key, params[key], period_count)

    for family in UNSUPPORTED_PARAMETER_FAMILIES:
        set_parameter_family_to_0(params, family, period_count)

    for level in INTERVENTION_LEVELS:
        params[f"Number of change times for levels of {level}"] = period_count

    interventions_start = periods[0].start_date
    intervention_times = [
        days_between(interventions_start, period.start_date) for period in periods
    ]
    for level in INTERVENTION_LEVELS:
        params[f"Change times for levels of {level}"] = list(intervention_times)

    # Case isolation
    params["Case isolation start time"] = 0
    params["Duration of case isolation policy"] = POLICY_DURATION
    params["Proportion of detected cases isolated over time"] = [
        proportion_for_intensity(period.case_isolation) for period in periods
    ]

    # Household quarantine
    params["Household quarantine start time"] = 0
    params["Duration of household quarantine policy"] = POLICY_DURATION
    params["Household level compliance with quarantine over time"] = [
        proportion_for_intensity(period.voluntary_home_quarantine)
        for period in periods
    ]

    # Social distancing
    params["Social distancing start time"] = 0
    params["Duration of social distancing"] = POLICY_DURATION
    params["Relative spatial contact rates over time given social distancing"] = [
        invert_proportion(proportion_for_intensity(period.social_distancing))
        for period in periods
    ]

    # School closure. Columns are primary school, secondary school,
    # university and workplaces; workplaces stay open.
    params["Place closure start time"] = 0
    params["Duration of place closure"] = POLICY_DURATION
    params["Duration of place closure over time"] = [POLICY_DURATION] * period_count
    open_places = []
    for period in periods:
        proportion = invert_proportion(proportion_for_intensity(period.school_closure))
        open_places.append([proportion, proportion, proportion, 1])
    params[
        "Proportion of places remaining open after closure by place type over time"
    ] = open_places

    logger.debug(
        "Assigned %d intervention periods, change times %s",
        period_count,
        intervention_times,
    )


def normalize_length(key: str, value, period_count: int) -> list:
    """
    Truncate an array to ``period_count`` entries, or pad it by repeating
    its first entry.
    """
    if not isinstance(value, list) or not value:
        raise FormatError(
            f"Expected a non-empty array for time-varying parameter '{key}', "
            f"got {value!r}"
        )
    values = value[:period_count]
    first = value[0]
    while len(values) < period_count:
        values.append(list(first) if isinstance(first, list) else first)
    return values


def set_parameter_family_to_0(
    params: ParameterDocument, family_name: str, period_count: int
) -> None:
    """
    Set an entire family of parameters to zero.

    A family is every parameter whose name contains ``family_name``,
    ignoring case. Scalars become 0 and arrays become arrays of zeros. The
    outer length of an array changes to ``period_count`` only for "over
    time" parameters; rows of a matrix keep the length of its first row.
    """
    family_name = family_name.lower()
    for key, value in list(params.items()):
        if family_name not in key.lower():
            continue
        if isinstance(value, list):
            length = period_count if "over time" in key.lower() else len(value)
            if value and isinstance(value[0], list):
                row_length = len(value[0])
                params[key] = [[0] * row_length for _ in range(length)]
            else:
                params[key] = [0] * length
        else:
            params[key] = 0


def assign_admin_parameters(params: ParameterDocument, subregion_name: str) -> None:
    """
    Restrict an admin unit document to a single level 1 admin unit.

    Args:
        params: Parsed admin unit file, modified in place
        subregion_name: Name of the admin unit, as written in the third
                        column of the admin unit lookup table

    Raises:
        NotFoundError: If the lookup table has no row, or more than one row,
                       for ``subregion_name``
    """
    rows = params.get(ADMIN_UNITS_KEY)
    if rows is not None and not isinstance(rows, list):
        rows = [[rows]]
    elif rows and not isinstance(rows[0], list):
        # A lookup table with a single line parses as a vector.
        rows = [rows]
    matches = [
        row for row in rows or [] if len(row) > 2 and row[2] == subregion_name
    ]
    if len(matches) != 1:
        raise NotFoundError(
            f"Could not find entry for '{subregion_name}' in "
            f"'{ADMIN_UNITS_KEY}' parameter: {json.dumps(rows)}"
        )

    params["Include holidays"] = 0
    params["Fix population size at specified value"] = 0
    params["Number of countries to include"] = 0
    params["Number of level 1 administrative units to include"] = 1
    params["List of level 1 administrative units to include"] = subregion_name

    # Unused parameter
    params.pop("Number of detected cases needed before outbreak alert triggered", None)

    params[ADMIN_UNITS_KEY] = matches
    logger.debug("Restricted admin units to '%s'", subregion_name)


def proportion_for_intensity(intensity: Optional[InterventionLevel]) -> float:
    """
    Map an intervention level to a compliance proportion.

    No intervention maps to 0. A numeric level is a percentage.
    """
    if intensity is None:
        return 0
    if isinstance(intensity, str):
        return INTENSITY_PROPORTIONS[Intensity(intensity)]
    if not 0 <= intensity <= 100:
        raise ValueError(f"Intervention percentage out of range: {intensity}")
    return intensity / 100


def invert_proportion(proportion: float) -> float:
    """Residual contact rate remaining after an intervention of the given effect."""
    return (100 - proportion * 100) / 100
