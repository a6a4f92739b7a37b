"""Configuration module for the IdP API façade."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]
