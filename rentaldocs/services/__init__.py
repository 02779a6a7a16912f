from .interfaces import FileStorage, RecordStore
from .agreement_facts import build_agreement_facts, signature_reference, format_date
from .agreement_service import AgreementService
from .document_upload import upload_slot_document

__all__ = ['FileStorage', 'RecordStore', 'build_agreement_facts', 'signature_reference', 'format_date',
           'AgreementService', 'upload_slot_document']
