"""Scheduled background jobs."""

from .dashboard_refresh import register_scheduler, run_refresh_once

__all__ = ["register_scheduler", "run_refresh_once"]
