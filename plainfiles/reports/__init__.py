"""Reporting package."""

from plainfiles.reports.city_report import CityReport, build_city_report

__all__ = ["CityReport", "build_city_report"]
