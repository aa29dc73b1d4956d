"""Service layer — script execution and interactive sessions."""
