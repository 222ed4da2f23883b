"""Access – filter names, parameter names, property names and sentinels."""
from __future__ import annotations

from enum import Enum


class Dimension(str, Enum):
    """Axis along which records are restricted."""

    LOCATION = "location"
    ENCOUNTER_TYPE = "encounter_type"
    PROGRAM = "program"


FILTER_NAME_PATIENT = "datafilter_patientFilter"
FILTER_NAME_VISIT = "datafilter_visitFilter"
FILTER_NAME_ENCOUNTER = "datafilter_encounterFilter"
FILTER_NAME_OBS = "datafilter_obsFilter"
FILTER_NAME_ENC_TYPE_PRIV_ENCOUNTER = "datafilter_encTypePrivBasedEncounterFilter"
FILTER_NAME_ENC_TYPE_PRIV_OBS = "datafilter_encTypePrivBasedObsFilter"
FILTER_NAME_PROGRAM_PROVIDER = "datafilter_programBasedProviderFilter"

FILTER_PARAM_PATIENT_IDS = "patientIds"
FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS = "hiddenEncounterTypeIds"
FILTER_PARAM_PROGRAM_ROLES = "programRoles"
FILTER_PARAM_ACCESSIBLE_ROLES = "accessibleRoles"

GP_RUN_IN_STRICT_MODE = "datafilter.strictMode"
GP_LOGIN_LOCATION_USER_PROPERTY = "datafilter.loginLocationUserProperty"

BASIS_TYPE_LOCATION = "Location"
BASIS_TYPE_PROGRAM = "Program"
ENTITY_TYPE_ROLE = "Role"
ENTITY_TYPE_USER = "User"

# Record ids are all positive, so this matches nothing.
NO_ACCESS_KEY = "-1"
NO_ACCESS: frozenset[str] = frozenset({NO_ACCESS_KEY})
UNRESTRICTED: frozenset[str] = frozenset({"*"})


def join_keys(keys: frozenset[str] | set[str]) -> str:
    """Encode *keys* as a filter parameter; empty input encodes as no access."""
    return ",".join(sorted(keys)) if keys else NO_ACCESS_KEY


def split_keys(value: str | None) -> list[str]:
    """Decode a filter parameter produced by :func:`join_keys`."""
    if not value:
        return [NO_ACCESS_KEY]
    return [v.strip() for v in value.split(",") if v.strip()] or [NO_ACCESS_KEY]


__all__ = [
    "BASIS_TYPE_LOCATION",
    "BASIS_TYPE_PROGRAM",
    "ENTITY_TYPE_ROLE",
    "ENTITY_TYPE_USER",
    "FILTER_NAME_ENCOUNTER",
    "FILTER_NAME_ENC_TYPE_PRIV_ENCOUNTER",
    "FILTER_NAME_ENC_TYPE_PRIV_OBS",
    "FILTER_NAME_OBS",
    "FILTER_NAME_PATIENT",
    "FILTER_NAME_PROGRAM_PROVIDER",
    "FILTER_NAME_VISIT",
    "FILTER_PARAM_ACCESSIBLE_ROLES",
    "FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS",
    "FILTER_PARAM_PATIENT_IDS",
    "FILTER_PARAM_PROGRAM_ROLES",
    "GP_LOGIN_LOCATION_USER_PROPERTY",
    "GP_RUN_IN_STRICT_MODE",
    "NO_ACCESS",
    "NO_ACCESS_KEY",
    "UNRESTRICTED",
    "Dimension",
    "join_keys",
    "split_keys",
]
