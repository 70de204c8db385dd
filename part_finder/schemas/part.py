from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from part_finder.config import STOCK_IN


class AlternativePartRecord(BaseModel):
    """An alternative suggested by the model; application and stock may be absent"""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    part_number: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    specs: List[str] = Field(default_factory=list)
    application: Optional[str] = None
    stock: Optional[str] = None

    @field_validator("specs", mode="before")
    @classmethod
    def _null_specs(cls, value):
        return [] if value is None else value

    @property
    def in_stock(self) -> bool:
        return self.stock == STOCK_IN


class PartRecord(AlternativePartRecord):
    """The primary match"""


class SearchResult(PartRecord):
    """Primary part fields at the top level plus its alternatives"""
    alternatives: List[AlternativePartRecord] = Field(default_factory=list)

    @field_validator("alternatives", mode="before")
    @classmethod
    def _null_alternatives(cls, value):
        return [] if value is None else value

    @property
    def part(self) -> PartRecord:
        return PartRecord(**self.model_dump(exclude={"alternatives"}))


class EnquiryDraft(BaseModel):
    """Contact details for a part enquiry. Never stored or transmitted."""
    name: str
    email: str
    phone: str
    part_number: str = ""
    brand: str = ""
    message: Optional[str] = None

    @field_validator("name", "email", "phone")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("This field is required")
        return value

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        if not local or not domain:
            raise ValueError("Enter a valid email address")
        return value
