from .common import FormModel, parse_payload, read_payload
