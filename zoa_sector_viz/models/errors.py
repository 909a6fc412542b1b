"""Exception types raised by the sector overlay engine."""


class SectorVizError(ValueError):
    """Base class for sector overlay errors."""


class CatalogIntegrityError(SectorVizError):
    """Catalog definition is malformed (duplicate sectors, unknown configs)."""


class CascadeConfigError(SectorVizError):
    """Root or selector value outside its enumerated domain."""
