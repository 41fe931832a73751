# app/schemas/client_schema.py
"""Request and response bodies for the client endpoints.

The wire format keeps the camelCase names the frontend already sends
(``firstName``, ``licenseFile``, ``expiryOfLL`` ...); Python code works with
the snake_case attribute names.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ClientRegisterIn(BaseModel):
    mobile: Optional[str] = None
    password: Optional[str] = None


class ClientLoginIn(BaseModel):
    mobile: Optional[str] = None
    password: Optional[str] = None


class ClientFieldsIn(BaseModel):
    """Profile fields as they arrive in a multipart form. Every value is the raw string."""

    first_name: Optional[str] = None
    mobile: Optional[str] = None
    application_no: Optional[str] = None
    phone: Optional[str] = None
    relation: Optional[str] = None
    permanent_address: Optional[str] = None
    temporary_address: Optional[str] = None
    dob: Optional[str] = None
    class_of_vehicle: Optional[str] = None
    date_of_enrolment: Optional[str] = None
    learners_license_no: Optional[str] = None
    expiry_of_ll: Optional[str] = Field(None, alias="expiryOfLL")
    main_test_date: Optional[str] = None
    total_fee: Optional[str] = None
    paid_fee: Optional[str] = None
    fee_discount: Optional[str] = None
    total_classes: Optional[str] = None
    classes_attended: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ClientCreateIn(ClientFieldsIn):
    password: Optional[str] = None


class ClientOut(BaseModel):
    id: int
    first_name: Optional[str] = None
    mobile: str
    application_no: Optional[str] = None
    phone: Optional[str] = None
    relation: Optional[str] = None
    permanent_address: Optional[str] = None
    temporary_address: Optional[str] = None
    dob: Optional[date] = None
    photo: Optional[str] = None
    class_of_vehicle: Optional[str] = None
    date_of_enrolment: Optional[date] = None
    learners_license_no: Optional[str] = None
    expiry_of_ll: Optional[date] = Field(None, alias="expiryOfLL")
    main_test_date: Optional[date] = None
    license_file: Optional[str] = None
    total_fee: Optional[float] = 0
    paid_fee: Optional[float] = 0
    fee_discount: Optional[float] = 0
    total_classes: Optional[int] = 0
    classes_attended: Optional[int] = 0
    created_at: Optional[datetime] = None

    model_config = CAMEL_CONFIG


class ClientMessageOut(BaseModel):
    message: str
    client: ClientOut


class ClientLoginOut(BaseModel):
    token: str
    client: ClientOut


class ClientUpdatedOut(BaseModel):
    message: str
    updated_client: ClientOut

    model_config = CAMEL_CONFIG
