from typing import Dict, List, Tuple

from marshmallow import Schema, fields, pre_load, EXCLUDE

# marshmallow's default message for a required field that was not sent
MISSING_MESSAGE = fields.Field.default_error_messages["required"]


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def split_validation_errors(messages) -> Tuple[List[str], Dict[str, list]]:
    """
    Separate "field not sent" errors from "field sent but wrong" errors.
    Returns (missing field names, {field: messages}) keyed by the JSON names.
    """
    missing, invalid = [], {}
    if not isinstance(messages, dict):
        return missing, {"_schema": messages}
    for field, errors in messages.items():
        if isinstance(errors, list) and MISSING_MESSAGE in errors:
            missing.append(field)
        else:
            invalid[field] = errors
    return sorted(missing), invalid


class RequestSchema(Schema):
    """Base for request bodies: unknown keys are dropped, blank strings count as missing."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def drop_blanks(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = {k: v for k, v in data.items() if not (isinstance(v, str) and not v.strip())}
        if "email" in cleaned:
            cleaned["email"] = _norm_email(cleaned["email"])
        return cleaned
