"""
Report per-column metadata of SAS datasets found under a directory tree.
"""

__version__ = "0.1.0"

DATASET_EXTENSION = ".sas7bdat"
