"""
Relay Fit CLI - Command-line interface for zone fitting jobs.

Usage:
    relay-fit fit config/fit_job.yaml --seed 42
    relay-fit evaluate config/fit_job.yaml
    relay-fit polygon config/fit_job.yaml
"""

__version__ = "1.0.0"
