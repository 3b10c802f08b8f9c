# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class ServiceNotFoundError(LookupError):
    pass


class ServicesContainer:
    """
    Registry of named collaborator services (entity lookups, plugin registry, client provider)
    made available to workflow steps.
    """

    def __init__(self, services: dict = None):
        self._services = dict(services or {})

    def register(self, name: str, service):
        self._services[name] = service
        return self

    def find(self, name: str):
        return self._services.get(name)

    def must_find(self, name: str):
        service = self.find(name)
        if service is None:
            raise ServiceNotFoundError(f'The service "{name}" is not registered in the services container')
        return service
