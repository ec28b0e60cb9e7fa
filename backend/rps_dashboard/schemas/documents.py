"""
Typed document records consumed by the PDF service

A DocumentRecord is either a certificate or a service report, tagged by
"kind". Use to_document_record() to map ORM rows at the store boundary.
"""
from typing import Annotated, Union

from pydantic import Field

from rps_dashboard.models.certificate import Certificate
from rps_dashboard.models.service_report import ServiceReport
from rps_dashboard.schemas.certificate import CertificateRecord
from rps_dashboard.schemas.service_report import ServiceReportRecord

DocumentRecord = Annotated[Union[CertificateRecord, ServiceReportRecord], Field(discriminator="kind")]


def to_document_record(row) -> Union[CertificateRecord, ServiceReportRecord]:
    """Maps a Certificate or ServiceReport row to its typed record."""
    if isinstance(row, Certificate):
        return CertificateRecord.model_validate(row)
    if isinstance(row, ServiceReport):
        return ServiceReportRecord.model_validate(row)
    raise TypeError(f"Not a document row: {type(row).__name__}")
