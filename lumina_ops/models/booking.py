import uuid
from datetime import date
from pydantic import BaseModel, Field, model_validator


class Booking(BaseModel):
    """
    A guest reservation supplied by the booking source.
    Read-only inside the operations core.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    property_id: str
    guest_name: str = Field(..., min_length=1, max_length=100)
    reference: str = Field(..., min_length=1, max_length=50)
    check_in: date
    check_out: date

    @model_validator(mode="after")
    def validate_dates(self):
        if self.check_out < self.check_in:
            raise ValueError("check_out must not precede check_in")
        return self

    class Config:
        frozen = True
