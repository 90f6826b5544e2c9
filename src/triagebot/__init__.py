"""triagebot - Pull request triage for GitHub project boards."""

__version__ = "0.1.0"
