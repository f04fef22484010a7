"""Text rendering of container keys and values for dumps."""

import math
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Any

import numpy as np

from seqvec.domain.models import VectorValue, ClusterRecord

ENTRY_SEPARATOR = " , "
_FIXED_PLACES = Decimal("0.001")
# wide enough for every finite double at three decimals
_FIXED_CONTEXT = Context(prec=400)


def format_double(value: float) -> str:
    """Render a double the way ``Double.toString`` does in Java."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0.0:
        return "-0.0" if math.copysign(1.0, value) < 0 else "0.0"
    if 1e-3 <= abs(value) < 1e7:
        return repr(value)
    mantissa, exponent = np.format_float_scientific(value, unique=True, trim="0").split("e")
    return f"{mantissa}E{int(exponent)}"


def format_vector(vector: VectorValue) -> str:
    """Fully itemized form: ``{1.0,2.0,3.0}``."""
    return "{" + ",".join(format_double(v) for v in vector.values.tolist()) + "}"


def _format_fixed(value: float) -> str:
    """``%.3f`` with ties rounded away from zero, as ``String.format`` does in Java."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    rounded = Decimal(repr(value)).quantize(
        _FIXED_PLACES, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT
    )
    return format(rounded, "f")


def _format_cluster_vector(vector: VectorValue) -> str:
    items = vector.values.tolist()
    if vector.name is not None:
        prefix = f"{vector.name} = "
    else:
        prefix = ""
    if any(v == 0.0 for v in items):
        body = ", ".join(f"{i}:{_format_fixed(v)}" for i, v in enumerate(items) if v != 0.0)
    else:
        body = ", ".join(_format_fixed(v) for v in items)
    return f"{prefix}[{body}]"


def format_cluster(record: ClusterRecord) -> str:
    """Generic rendering of a ClusterWritable payload."""
    model = record.model
    if model is None:
        return f"{record.simple_name}[{len(record.payload)} bytes]"
    return (
        f"{model.identifier}{{n={model.num_observations}"
        f" c={_format_cluster_vector(model.center)}"
        f" r={_format_cluster_vector(model.radius)}}}"
    )


def format_value(value: Any) -> str:
    if isinstance(value, VectorValue):
        return format_vector(value)
    if isinstance(value, ClusterRecord):
        return format_cluster(value)
    return str(value)


def format_entry(key: Any, value: Any) -> str:
    return f"{format_value(key)}{ENTRY_SEPARATOR}{format_value(value)}"
