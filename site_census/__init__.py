"""
SiteCensus package initializer.
Defines package version; the CLI lives in ``site_census.cli``.
"""
__version__ = "0.1.0"
