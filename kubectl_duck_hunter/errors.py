"""Errors raised by the duck hunting core."""


class DuckHunterError(Exception):
    """Base class for duck hunter errors."""


class ResourceNotFoundError(DuckHunterError):
    """No kind/resource mapping exists for a name at a group-version."""

    def __init__(self, group_version: str, name: str, looking_for: str = "kind"):
        self.group_version = group_version
        self.name = name
        super().__init__(f"{looking_for} not found for {name} in {group_version}")


class ResourceNotKnownError(DuckHunterError):
    """A reference names a resource the cluster does not serve."""

    def __init__(self, api_version: str, kind: str):
        self.api_version = api_version
        self.kind = kind
        super().__init__(f'resource "{kind} {api_version}" not known to the cluster')
