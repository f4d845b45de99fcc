"""Service layer: public operations returning ServiceResult."""
