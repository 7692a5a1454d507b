from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from enum import Enum
import math

AreaUnit = Literal["Marla", "Kanal"]


class PropertyStatus(str, Enum):
    AVAILABLE = "Available"
    PENDING = "Pending"
    RENTED = "Rented"


class SortKey(str, Enum):
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    AREA_HIGH = "area-high"


class PropertyResponse(BaseModel):
    id: str
    title: str
    description: str
    price: float
    area: float
    area_unit: AreaUnit
    bedrooms: int
    floors: int = 0
    kitchens: int = 0
    has_lawn: bool = False
    additional_info: Optional[str] = None
    address: str
    city: str
    images: List[str] = []
    seller_id: Optional[str] = None
    seller_phone: Optional[str] = None
    seller_name: Optional[str] = None
    listed_date: Optional[str] = None
    status: PropertyStatus
    property_type: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PropertyCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str
    price: float = Field(gt=0)
    area: float = Field(gt=0)
    area_unit: AreaUnit = "Marla"
    bedrooms: int = Field(ge=0)
    floors: int = Field(ge=0)
    kitchens: int = Field(ge=0)
    has_lawn: bool = False
    additional_info: Optional[str] = None
    address: str
    city: str
    images: List[str] = []
    seller_phone: str
    seller_name: str
    listed_date: Optional[str] = None
    status: Optional[PropertyStatus] = None
    property_type: str


class PropertyUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    area: Optional[float] = Field(default=None, gt=0)
    area_unit: Optional[AreaUnit] = None
    bedrooms: Optional[int] = Field(default=None, ge=0)
    floors: Optional[int] = Field(default=None, ge=0)
    kitchens: Optional[int] = Field(default=None, ge=0)
    has_lawn: Optional[bool] = None
    additional_info: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    images: Optional[List[str]] = None
    seller_phone: Optional[str] = None
    seller_name: Optional[str] = None
    property_type: Optional[str] = None


class PropertyStatusUpdate(BaseModel):
    status: PropertyStatus


class ListingFilters(BaseModel):
    """The seven filter options understood by the listing page."""
    model_config = {"frozen": True}

    search_term: Optional[str] = None
    city_filter: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    property_type_filter: Optional[str] = None
    min_bedrooms: Optional[int] = None
    has_lawn_filter: Optional[bool] = None


class ListingWindow(BaseModel):
    """Zero-based inclusive row range [start, end] for one page."""
    model_config = {"frozen": True}

    page: int
    page_size: int
    start: int
    end: int

    @property
    def offset(self) -> int:
        return self.start

    @property
    def limit(self) -> int:
        return self.end - self.start + 1

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.page_size) if total > 0 else 0


class ListingResult(BaseModel):
    rows: List[dict] = []
    total: int = 0
    window: ListingWindow
    error: Optional[str] = None


class PropertyListResponse(BaseModel):
    rows: List[PropertyResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    request_id: Optional[str] = None
    error: Optional[str] = None
