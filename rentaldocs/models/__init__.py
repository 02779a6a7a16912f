"""Models module"""

from .data_models import (
    CompanyDetails,
    CustomerDetails,
    VehicleDetails,
    RentalWindow,
    AgreementFacts,
    ResolvedImage,
    Degradation,
    ComposedDocument,
    GenerationResult
)

from .schemas import (
    CompanyDetailsSchema,
    CustomerDetailsSchema,
    VehicleDetailsSchema,
    RentalWindowSchema,
    AgreementFactsSchema,
    SlotPayloadSchema,
    ComplianceResultSchema
)

__all__ = [
    # Data models
    'CompanyDetails',
    'CustomerDetails',
    'VehicleDetails',
    'RentalWindow',
    'AgreementFacts',
    'ResolvedImage',
    'Degradation',
    'ComposedDocument',
    'GenerationResult',

    # Schemas
    'CompanyDetailsSchema',
    'CustomerDetailsSchema',
    'VehicleDetailsSchema',
    'RentalWindowSchema',
    'AgreementFactsSchema',
    'SlotPayloadSchema',
    'ComplianceResultSchema'
]
