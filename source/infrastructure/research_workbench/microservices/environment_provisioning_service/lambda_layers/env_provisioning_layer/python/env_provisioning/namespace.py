# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from env_provisioning.constants import NAMESPACE_PARAM_KEY, STACK_NAME_PREFIX


def get_namespace_and_index(resolved_params: list, timestamp) -> tuple:
    """
    Make a static "Namespace" launch param unique for this launch.

    The value gets the ``analysis-`` prefix (required by the product templates) and a
    ``-<timestamp>`` suffix unless its last ``-`` separated segment already equals the timestamp.
    The params list is not modified.

    Returns
    -------
    tuple
        ``(namespace_value, index)``; the index is -1 when there is no "Namespace" param.
    """
    index = next(
        (i for i, param in enumerate(resolved_params) if param.get('Key') == NAMESPACE_PARAM_KEY),
        -1,
    )
    if index < 0:
        return '', -1

    namespace = resolved_params[index].get('Value') or ''
    if not namespace.startswith(STACK_NAME_PREFIX):
        namespace = f'{STACK_NAME_PREFIX}{namespace}'
    if namespace.split('-')[-1] != str(timestamp):
        namespace = f'{namespace}-{timestamp}'
    return namespace, index
