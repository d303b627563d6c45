"""Pregnancy companion: health-risk scoring, daily reports and the Dr. AI chat."""

__version__ = "0.1.0"
