"""Built-in catalogues of virtual UI widget types."""

from .lib import (
    CATALOGUES,
    PUB_CATALOGUE,
    STD_CATALOGUE,
    CatalogueMeta,
    get_catalogue,
    list_catalogues,
)

__all__ = [
    # Tables
    "STD_CATALOGUE",
    "PUB_CATALOGUE",
    # Registry
    "CatalogueMeta",
    "CATALOGUES",
    "list_catalogues",
    "get_catalogue",
]
