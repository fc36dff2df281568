"""
StudyScribe - Core Application Package

This package contains the main components of the study companion:
- cli: Terminal shell with one tab per feature panel
- config: Configuration management
- setup_wizard: Interactive first-run setup
- models: Task and Note records
- storage: Persistent record store
- llm_providers: Gemini transport
- gateway: Prompt templates and failure handling around the LLM
- panels: Task Manager, Note Editor, PYQ Analyzer, Doubt Resolver
"""

__version__ = "1.0.0"
__author__ = "StudyScribe Contributors"
