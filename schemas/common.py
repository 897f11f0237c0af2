"""
Request payload helpers shared by every blueprint.

Forms arrive either as JSON or as urlencoded/multipart fields; both are
flattened into a plain dict and validated with a pydantic model.
"""

from flask import request, jsonify
from pydantic import BaseModel, ValidationError, model_validator


class FormModel(BaseModel):
    """Base for form DTOs: blank fields count as not submitted."""

    class Config:
        str_strip_whitespace = True
        extra = 'ignore'

    @model_validator(mode='before')
    @classmethod
    def drop_blank_fields(cls, values):
        if isinstance(values, dict):
            return {
                key: value for key, value in values.items()
                if not (isinstance(value, str) and value.strip() == '')
            }
        return values


def read_payload(list_fields=()):
    """Return the submitted form as a dict, multi-value fields as lists."""
    if request.is_json:
        return dict(request.get_json(silent=True) or {})

    data = {}
    for key in request.form:
        name = key[:-2] if key.endswith('[]') else key
        if name in list_fields:
            values = request.form.getlist(key)
            data[name] = [value for value in values if value != '']
        else:
            data[name] = request.form.get(key)
    return data


def describe_errors(exc: ValidationError):
    fields = {}
    missing = []
    for err in exc.errors():
        name = '.'.join(str(part) for part in err['loc']) or 'form'
        if err['type'] == 'missing':
            missing.append(name)
        fields[name] = err['msg']

    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    else:
        message = "Invalid input: " + "; ".join(f"{k}: {v}" for k, v in fields.items())
    return message, fields


def parse_payload(schema, data):
    """
    Validate ``data`` against ``schema``.

    Returns ``(dto, None)`` on success and ``(None, (response, 400))`` on
    failure, the response echoing the submitted values back.
    """
    try:
        return schema.model_validate(data), None
    except ValidationError as e:
        message, fields = describe_errors(e)
        echoed = {k: v for k, v in data.items() if 'password' not in k}
        return None, (jsonify({"error": message, "fields": fields, "data": echoed}), 400)
