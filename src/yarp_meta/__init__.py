"""Registry construction and template context projection for yarp unit data."""

__version__ = "0.1.0"
