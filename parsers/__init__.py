"""
Parsers module
Decode project, bank, arrangement and .ot files into core records
"""

from .bank_parser import BankParser, parse_bank_file
from .project_parser import ProjectParser, parse_project_file
from .sample_parser import SampleAttributesParser, parse_sample_attributes_file, sample_attributes_checksum
from .arrangement_parser import ArrangementParser, parse_arrangement_file

__all__ = [
    "BankParser",
    "parse_bank_file",
    "ProjectParser",
    "parse_project_file",
    "SampleAttributesParser",
    "parse_sample_attributes_file",
    "sample_attributes_checksum",
    "ArrangementParser",
    "parse_arrangement_file",
]
