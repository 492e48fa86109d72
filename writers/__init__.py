"""
Writers module
Encode core records back into device files
"""

from .bank_writer import BankWriter, encode_bank, write_bank_file
from .project_writer import ProjectWriter, write_project_file
from .sample_writer import SampleAttributesWriter, encode_sample_attributes, write_sample_attributes_file
from .arrangement_writer import ArrangementWriter, encode_arrangement, write_arrangement_file

__all__ = [
    "BankWriter",
    "encode_bank",
    "write_bank_file",
    "ProjectWriter",
    "write_project_file",
    "SampleAttributesWriter",
    "encode_sample_attributes",
    "write_sample_attributes_file",
    "ArrangementWriter",
    "encode_arrangement",
    "write_arrangement_file",
]
