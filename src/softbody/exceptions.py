class SoftBodyError(Exception):
    """Base class for soft-body simulation errors."""
    def __init__(self, message="Soft-body simulation error."):
        super().__init__(message)

class InvalidTopologyError(SoftBodyError):
    """Topology generator called with unusable shape parameters."""
    def __init__(self, message="Invalid topology parameters."):
        super().__init__(message)

class InvalidBodyError(SoftBodyError):
    """Body arrays or link indices are inconsistent."""
    def __init__(self, message="Invalid body."):
        super().__init__(message)

class InvalidSolverParameterError(SoftBodyError):
    """Step called with a bad iteration count, time step or force."""
    def __init__(self, message="Invalid solver parameter."):
        super().__init__(message)

class InvalidConfigError(SoftBodyError, ValueError):
    """Scene configuration failed validation."""
    def __init__(self, message="Invalid configuration."):
        super().__init__(message)
