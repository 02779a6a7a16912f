"""Data schemas and validation models"""

from datetime import date, datetime

from marshmallow import Schema, fields, validate, validates, ValidationError, post_load

from .data_models import AgreementFacts, CompanyDetails, CustomerDetails, RentalWindow, VehicleDetails


class DateLikeField(fields.Field):
    """Issue dates arrive as date objects or as already-formatted strings."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return str(value)

    def _deserialize(self, value, attr, data, **kwargs):
        if value in (None, ""):
            return None
        if not isinstance(value, (str, date, datetime)):
            raise ValidationError("Issue date must be a date or a date string")
        return value


class CompanyDetailsSchema(Schema):

    name = fields.String(
        required=True,
        validate=validate.Length(min=1, max=200),
        error_messages={"required": "Company name is required"}
    )
    address = fields.String(load_default="")
    phone = fields.String(load_default="")
    email = fields.String(load_default="")
    logo_path = fields.String(allow_none=True, load_default=None)

    @post_load
    def make_company(self, data, **kwargs):
        return CompanyDetails(**data)


class CustomerDetailsSchema(Schema):

    name = fields.String(required=True, error_messages={"required": "Customer name is required"})
    email = fields.String(load_default="N/A")
    phone = fields.String(load_default="N/A")
    license_number = fields.String(load_default="N/A")
    address = fields.String(load_default="N/A")

    @post_load
    def make_customer(self, data, **kwargs):
        return CustomerDetails(**data)


class VehicleDetailsSchema(Schema):

    description = fields.String(required=True, error_messages={"required": "Vehicle description is required"})
    registration = fields.String(load_default="N/A")
    odometer = fields.String(load_default="N/A")
    fuel = fields.String(load_default="N/A")

    @post_load
    def make_vehicle(self, data, **kwargs):
        return VehicleDetails(**data)


class RentalWindowSchema(Schema):

    pickup_date = fields.String(required=True)
    pickup_time = fields.String(load_default="N/A")
    dropoff_date = fields.String(required=True)
    dropoff_time = fields.String(load_default="N/A")
    pickup_location = fields.String(load_default="N/A")
    dropoff_location = fields.String(load_default="N/A")

    @post_load
    def make_rental(self, data, **kwargs):
        return RentalWindow(**data)


class AgreementFactsSchema(Schema):

    company = fields.Nested(CompanyDetailsSchema, required=True)
    customer = fields.Nested(CustomerDetailsSchema, required=True)
    vehicle = fields.Nested(VehicleDetailsSchema, required=True)
    rental = fields.Nested(RentalWindowSchema, required=True)

    insurance_text = fields.String(
        required=True,
        validate=validate.Length(min=1),
        error_messages={"required": "Insurance declaration is required"}
    )
    clauses = fields.List(
        fields.String(validate=validate.Length(min=1)),
        required=True,
        validate=validate.Length(min=1, error="At least one clause is required")
    )

    agreement_number = fields.String(
        required=True,
        validate=validate.Length(min=1, max=64),
        error_messages={"required": "Agreement number is required"}
    )
    created_date = fields.String(required=True)

    customer_signature = fields.String(allow_none=True, load_default=None)
    admin_signature = fields.String(allow_none=True, load_default=None)
    customer_name_signed = fields.String(allow_none=True, load_default=None)
    admin_name = fields.String(allow_none=True, load_default=None)
    signed_date = fields.String(allow_none=True, load_default=None)

    @validates("agreement_number")
    def validate_agreement_number(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Agreement number cannot be blank")

    @post_load
    def make_facts(self, data, **kwargs):
        return AgreementFacts(**data)


class SlotPayloadSchema(Schema):

    url = fields.String()
    issue_date = DateLikeField(data_key="issueDate", allow_none=True)
    document_type = fields.String(data_key="docType", allow_none=True)


class ComplianceFailureSchema(Schema):

    field = fields.String()
    reason = fields.String()


class ComplianceResultSchema(Schema):
    """Compliance payload in the shape the checkout form submits it."""

    is_complete = fields.Boolean(data_key="isComplete")
    license_number = fields.String(data_key="drivingLicenseNumber")
    national_insurance_number = fields.String(data_key="niNumber")
    per_slot = fields.Dict(
        keys=fields.String(),
        values=fields.Nested(SlotPayloadSchema),
        data_key="documents"
    )
    failures = fields.List(fields.Nested(ComplianceFailureSchema))
    completed_count = fields.Integer(data_key="completedCount", dump_only=True)
    total_required = fields.Integer(data_key="totalRequired")
