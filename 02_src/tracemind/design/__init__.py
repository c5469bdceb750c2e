"""Design module."""

from .generator import DesignGenerator, parse_design_response, validate_design

__all__ = ["DesignGenerator", "parse_design_response", "validate_design"]
