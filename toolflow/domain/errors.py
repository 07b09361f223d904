"""Toolflow errors - raised while defining or registering a flow, never while running one."""


class FlowError(Exception):
    """Base class for toolflow errors."""


class GraphStructureError(FlowError, ValueError):
    """Static graph is malformed (reserved/duplicate name, dangling edge, missing entry)."""


class FieldSchemaError(FlowError, ValueError):
    """Dynamic field set is malformed (dependency cycle, bad select/number/widget config)."""


class ResourceFetchError(FlowError):
    """Widget HTML could not be fetched while registering a UI resource."""
