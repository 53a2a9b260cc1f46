"""Lightweight request-body validation utilities.

Provides minimal schema-like checking with clear, consistent error
responses for the JSON API. Not a general JSON Schema implementation.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'bool', 'list', 'dict'
Extras examples:
  max_len (for str), min_len (str), allow_empty (str)
  min / max (int)
  item_type (list element primitive type)

Example:
 schema = {
   'url': ('str', True, {'max_len': 2048})
 }
 ok, data_or_err = validate(data, schema)

If invalid: (False, {'field': 'url', 'error': 'too long', 'code': 'max_len'})
If valid: (True, normalized_data)
"""
from __future__ import annotations
from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': str,
    'int': int,
    'bool': bool,
    'list': list,
    'dict': dict,
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        if not isinstance(spec, tuple) or len(spec) < 2:
            return _fail('__schema__', f'invalid spec for {name}', 'schema')
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            else:
                continue
        value = payload[name]
        py_type = PRIMITIVES[type_name]
        # bool is an int subclass; JSON true/false must not pass as numbers
        if not isinstance(value, py_type) or (type_name == 'int' and isinstance(value, bool)):
            return _fail(name, f'expected {type_name}', 'type')
        if type_name == 'str':
            s = value.strip() if not extras.get('allow_empty') else value
            if not extras.get('allow_empty') and len(s) == 0:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(value) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            if 'min_len' in extras and len(value) < extras['min_len']:
                return _fail(name, 'too short', 'min_len')
            out[name] = value if extras.get('preserve_whitespace') else s
        elif type_name == 'int':
            if 'min' in extras and value < extras['min']:
                return _fail(name, 'too small', 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, 'too large', 'max')
            out[name] = value
        elif type_name == 'list':
            item_type = extras.get('item_type')
            if item_type:
                it = PRIMITIVES.get(item_type)
                if not it:
                    return _fail('__schema__', f'unsupported item_type {item_type}', 'schema')
                for idx, elem in enumerate(value):
                    if not isinstance(elem, it):
                        return _fail(name, f'element {idx} not {item_type}', 'item_type')
            out[name] = value
        else:
            out[name] = value
    return True, out


# Predefined schemas used by the HTTP handlers
GENERATE_DUNGEON = {
    'world_id': ('str', True, {'min_len': 1, 'max_len': 64}),
    'name': ('str', False, {'max_len': 200}),
    'params': ('dict', False),
    'seed': ('int', False, {'min': 0, 'max': 2**31 - 1}),
    'preview': ('bool', False),
    'detail': ('dict', False),
}
MAP_IMAGE = {
    'url': ('str', True, {'min_len': 1, 'max_len': 2048})
}
