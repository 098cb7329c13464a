"""newsframes - headline framing analysis on a LangGraph pipeline."""

__version__ = "0.3.0"
