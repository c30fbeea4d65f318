"""Service layer: orchestrates the domain and reports ServiceResult."""
