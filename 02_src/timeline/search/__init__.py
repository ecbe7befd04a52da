"""Workflow search module."""

from .search import IWorkflowSearch, WorkflowSearch

__all__ = ["IWorkflowSearch", "WorkflowSearch"]
