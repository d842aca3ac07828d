"""I/O utilities for catalogs, profiles and JSON artifacts."""

from scholarmatch.io.catalog import (
    load_catalog,
    load_catalog_df,
    load_profile,
    records_to_scholarships,
    scholarships_to_frame,
)
from scholarmatch.io.jsonfiles import read_json_file, write_json_atomic

__all__ = [
    "load_catalog",
    "load_catalog_df",
    "load_profile",
    "read_json_file",
    "records_to_scholarships",
    "scholarships_to_frame",
    "write_json_atomic",
]
