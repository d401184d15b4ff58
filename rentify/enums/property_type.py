from enum import Enum


class PropertyType(str, Enum):
    """Enum for different types of properties"""

    APARTMENT = "apartment"
    HOUSE = "house"
    STUDIO = "studio"
    CONDO = "condo"
    LOFT = "loft"

    def __str__(self):
        return self.value
