"""Value checks for ParameterSpec-described fields."""

from __future__ import annotations

import logging
import math
from typing import Any

from flowise_core.schemas.parameters import ParameterSpec, ParamType

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_parameter(spec: ParameterSpec, value: Any) -> str | None:
    """Return an error message if *value* does not satisfy *spec*, else None.

    ``None`` counts as missing: it is an error only for required parameters.
    """
    if value is None:
        if spec.required:
            return f'Required parameter "{spec.label}" is missing'
        return None

    if spec.type == ParamType.NUMBER and not _is_number(value):
        return f'Parameter "{spec.label}" must be a number'
    if spec.type == ParamType.BOOLEAN and not isinstance(value, bool):
        return f'Parameter "{spec.label}" must be a boolean'
    if spec.type in (ParamType.STRING, ParamType.SELECT) and not isinstance(value, str):
        return f'Parameter "{spec.label}" must be a string'

    if spec.type == ParamType.NUMBER:
        if not math.isfinite(value):
            return f'Parameter "{spec.label}" must be a finite number'
        if spec.min is not None and value < spec.min:
            return f'Parameter "{spec.label}" must be greater than or equal to {spec.min:g}'
        if spec.max is not None and value > spec.max:
            return f'Parameter "{spec.label}" must be less than or equal to {spec.max:g}'

    if spec.options is not None and value not in spec.options:
        return f'Parameter "{spec.label}" must be one of: {", ".join(spec.options)}'

    if spec.validator is not None:
        try:
            ok = spec.validator(value)
        except (TypeError, ValueError, AttributeError):
            logger.debug("Validator for %s raised on %r", spec.name, value, exc_info=True)
            ok = False
        if not ok:
            return f'Parameter "{spec.label}" failed validation'

    return None
