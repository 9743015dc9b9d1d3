"""
Module 04 - Job Lifecycle

Composable start/shutdown pairs for long-running concurrent work.
"""
from .jobs import RunningJob, combine_jobs, spawn_job

__all__ = ["RunningJob", "combine_jobs", "spawn_job"]
