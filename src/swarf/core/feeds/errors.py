"""Errors raised while resolving cutting parameters."""


class ResolverError(ValueError):
    """Base class for cutting-parameter resolution failures."""


class UnknownMaterial(ResolverError):
    def __init__(self, material: str):
        super().__init__(f"Unknown material: {material}")
        self.material = material


class InvalidToolDiameter(ResolverError):
    def __init__(self, diameter: float):
        super().__init__(f"Invalid tool diameter: {diameter}")
        self.diameter = diameter


class InvalidEngagement(ResolverError):
    pass
