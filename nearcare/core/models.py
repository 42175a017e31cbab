from typing import List, Literal, Optional

from pydantic import BaseModel, Field, FiniteFloat

GENERIC_FACILITY_NAME = "Medical Facility"


class UserLocation(BaseModel):
    lat: FiniteFloat
    lng: FiniteFloat


class Facility(BaseModel):
    """
    A healthcare point of interest.

    `distance` is filled in by the ranking engine (km from the user) and is
    absent until a location is known.
    """
    id: str
    name: str = GENERIC_FACILITY_NAME
    type: str
    address: Optional[str] = None
    lat: FiniteFloat
    lng: FiniteFloat
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    hours: Optional[str] = None
    services: List[str] = Field(default_factory=list)
    distance: Optional[float] = Field(None, ge=0)


class Notice(BaseModel):
    """Non-blocking user notification, shown as a toast."""
    title: str
    description: str = ""
    variant: Literal["default", "destructive"] = "default"


class MarkerSpec(BaseModel):
    kind: Literal["user", "pin", "facility"]
    lat: float
    lng: float
    color: str
    popup: str
    facility_id: Optional[str] = None
