from .layout_engine import LayoutEngine
from .agreement_compositor import AgreementCompositor, agreement_filename
from .legal_texts import INSURANCE_DECLARATION, TERMS_AND_CONDITIONS

__all__ = ['LayoutEngine', 'AgreementCompositor', 'agreement_filename', 'INSURANCE_DECLARATION',
           'TERMS_AND_CONDITIONS']
