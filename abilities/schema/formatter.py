"""Render one ``SchemaViolation`` as a human-readable sentence.

The parameter name is qualified with the violation's instance path in
bracket form, so ``input`` with pointer ``/items/0/url`` reads
``input[items][0][url]``.
"""

from __future__ import annotations

import json
from typing import Any

from abilities.schema.adapter import SchemaViolation

_FORMAT_MESSAGES: dict[str, str] = {
    "email": "Invalid email address.",
    "date-time": "Invalid date.",
    "uuid": "{param} is not a valid UUID.",
    "ipv4": "{param} is not a valid IP address.",
    "ipv6": "{param} is not a valid IP address.",
    "hostname": "{param} is not a valid hostname.",
}


def bracket_path(instance_path: str) -> str:
    """Convert a JSON Pointer (``/a/0/b``) to bracket form (``[a][0][b]``)."""
    if not instance_path:
        return ""
    return "[" + instance_path[1:].replace("/", "][") + "]"


def _render(value: Any) -> str:
    """Render *value* the way it reads in JSON, strings unquoted."""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return json.dumps(value)


def _plural(limit: Any, singular: str, plural: str) -> str:
    return singular if limit == 1 else plural


def format_error(violation: SchemaViolation, param: str = "") -> str:
    """Return the sentence describing *violation* for parameter *param*."""
    full = param + bracket_path(violation.instance_path)
    params = violation.params
    keyword = violation.keyword

    if keyword == "type":
        return f"{full} is not of type {params['type']}."

    if keyword == "required":
        return f"{params['missingProperty']} is a required property of {full}."

    if keyword == "additionalProperties":
        return f"{params['additionalProperty']} is not a valid property of Object."

    if keyword == "enum":
        allowed = params["allowedValues"]
        values = ", ".join(_render(v) for v in allowed)
        if len(allowed) == 1:
            return f"{full} is not {values}."
        return f"{full} is not one of {values}."

    if keyword == "pattern":
        return f"{full} does not match pattern {params['pattern']}."

    if keyword == "format":
        fmt = params["format"]
        template = _FORMAT_MESSAGES.get(fmt)
        if template is None:
            return f"Invalid {fmt}."
        return template.format(param=full)

    if keyword == "minimum":
        return f"{full} must be greater than or equal to {_render(params['limit'])}"
    if keyword == "exclusiveMinimum":
        return f"{full} must be greater than {_render(params['limit'])}"
    if keyword == "maximum":
        return f"{full} must be less than or equal to {_render(params['limit'])}"
    if keyword == "exclusiveMaximum":
        return f"{full} must be less than {_render(params['limit'])}"

    if keyword == "multipleOf":
        return f"{full} must be a multiple of {_render(params['multipleOf'])}."

    if keyword in ("anyOf", "oneOf"):
        return f"{full} is invalid (failed {keyword} validation)."

    if keyword in ("minLength", "maxLength"):
        limit = params["limit"]
        bound = "at least" if keyword == "minLength" else "at most"
        return f"{full} must be {bound} {limit} {_plural(limit, 'character', 'characters')} long."

    if keyword in ("minItems", "maxItems"):
        limit = params["limit"]
        bound = "at least" if keyword == "minItems" else "at most"
        return f"{full} must contain {bound} {limit} {_plural(limit, 'item', 'items')}."

    if keyword == "uniqueItems":
        return f"{full} has duplicate items."

    if keyword in ("minProperties", "maxProperties"):
        limit = params["limit"]
        bound = "at least" if keyword == "minProperties" else "at most"
        return f"{full} must contain {bound} {limit} {_plural(limit, 'property', 'properties')}."

    return violation.message or f"{full} is invalid (failed {keyword} validation)."
