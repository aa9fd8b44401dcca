"""Core utilities: constants, exceptions, logging and pagination."""
