# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Resolution of ``${variable}`` expressions in the keys and values of environment type
configuration params and tags.
"""

import re

from env_provisioning.errors import VariableResolutionError

VARIABLE_EXPRESSION = re.compile(r'\$\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}')


def _to_text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ','.join(_to_text(v) for v in value)
    return str(value)


def resolve_expression(template, resolved_vars: dict) -> str:
    if template is None:
        return ''

    def substitute(match):
        name = match.group(1)
        if name not in resolved_vars:
            raise VariableResolutionError(f'The variable "{name}" in the expression "{template}" is not defined')
        return _to_text(resolved_vars[name])

    return VARIABLE_EXPRESSION.sub(substitute, str(template))


def resolve_var_expressions(key_value_pairs, resolved_vars: dict) -> list:
    """
    Resolve variable expressions in a list of ``{"key": ..., "value": ...}`` pairs, as stored in
    an environment type configuration, into the ``[{"Key": ..., "Value": ...}]`` shape expected by
    AWS Service Catalog.
    """
    return [
        {
            'Key': resolve_expression(pair.get('key'), resolved_vars),
            'Value': resolve_expression(pair.get('value'), resolved_vars),
        }
        for pair in key_value_pairs or []
    ]


def union_by_key(*tag_lists) -> list:
    """Stable union of tag lists; the first tag seen for a Key wins."""
    seen = set()
    result = []
    for tags in tag_lists:
        for tag in tags or []:
            if tag['Key'] in seen:
                continue
            seen.add(tag['Key'])
            result.append(tag)
    return result
