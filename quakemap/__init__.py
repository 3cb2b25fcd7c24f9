"""Quakemap - seismic event map driven by the USGS real-time feeds."""

__version__ = "1.0.0"
