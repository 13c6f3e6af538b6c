"""wrfbuild — guided WRF/WPS installation and compilation."""

__version__ = "0.1.0"
