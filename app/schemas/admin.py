from pydantic import BaseModel, Field
from typing import Dict, Literal, Optional

class UserResponse(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Literal["seller", "buyer", "admin"]
    created_at: Optional[str] = None

class MetricsTotalsResponse(BaseModel):
    total_properties: int
    properties_by_status: Dict[str, int]
    total_users: int
    users_by_role: Dict[str, int]

class PriceSuggestionRequest(BaseModel):
    property_type: str = Field(min_length=1)
    area: float = Field(gt=0)
    area_unit: Literal["Marla", "Kanal"] = "Marla"
    bedrooms: int = Field(ge=0)
    floors: int = Field(ge=0)
    kitchens: int = Field(ge=0)
    has_lawn: bool = False
    city: str = Field(min_length=1)
    address: Optional[str] = None
    furnishing_status: Literal["furnished", "unfurnished"] = "unfurnished"
    additional_info: Optional[str] = None

class PriceSuggestionResponse(BaseModel):
    suggested_price: int
    range_low: int
    range_high: int

class UserRoleUpdate(BaseModel):
    role: Literal["seller", "buyer", "admin"]
