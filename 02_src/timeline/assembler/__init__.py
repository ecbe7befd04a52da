"""Workflow tree assembly module."""

from .assembler import IWorkflowTreeAssembler, WorkflowTreeAssembler

__all__ = ["IWorkflowTreeAssembler", "WorkflowTreeAssembler"]
