from datetime import datetime
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import AwareDatetime, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

# MongoDB ObjectId in its 24-character hex form
PRODUCT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

DataT = TypeVar("DataT")


def _timestamp_input(value: Any) -> Any:
    """Only ISO-8601 strings (or datetimes from Python callers) are timestamps."""
    if not isinstance(value, (str, datetime)):
        raise ValueError("must be an ISO-8601 timestamp string")
    return value


# Full date-time with a zone offset; numbers and bare dates are rejected
IsoTimestamp = Annotated[AwareDatetime, BeforeValidator(_timestamp_input)]


class CamelModel(BaseModel):
    """Base model whose fields are read and written in camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# Optional fields below use their base type with a None default: leaving a
# field out is fine, but an explicit null fails validation.
class ProductBase(CamelModel):
    """Rules shared by every product payload."""
    name: str = Field(..., min_length=1, max_length=100, description="Product name")
    description: str = Field(None, description="Product description")
    price: float = Field(
        ..., gt=0, strict=True, allow_inf_nan=False,
        description="Product price (must be greater than zero)",
    )
    category: str = Field(..., min_length=1, max_length=50, description="Product category")


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    stock: int = Field(default=0, ge=0, strict=True, description="Available stock (zero or greater)")
    release_date: IsoTimestamp = Field(None, description="Release date (ISO-8601 with zone)")


class ProductUpdate(CamelModel):
    """Schema for updating an existing product. All fields are optional."""
    name: str = Field(None, min_length=1, max_length=100, description="Product name")
    description: str = Field(None, description="Product description")
    price: float = Field(None, gt=0, strict=True, allow_inf_nan=False, description="Product price")
    category: str = Field(None, min_length=1, max_length=50, description="Product category")
    stock: int = Field(None, ge=0, strict=True, description="Available stock")
    release_date: IsoTimestamp = Field(None, description="Release date (ISO-8601 with zone)")


class ProductResponse(CamelModel):
    """Schema for a stored product, as returned by the API."""
    id: Annotated[str, BeforeValidator(str)] = Field(..., alias="_id", description="Product ID")
    name: str
    description: Optional[str] = None
    price: float
    category: str
    stock: int
    release_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ProductListData(BaseModel):
    products: List[ProductResponse]


class FieldError(BaseModel):
    """A single validation failure."""
    field: str
    message: str


class ApiResponse(BaseModel, Generic[DataT]):
    """Envelope wrapping every successful response."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class ErrorResponse(BaseModel):
    """Envelope wrapping every failed response."""
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[List[FieldError]] = None
