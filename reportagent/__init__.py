"""
ReportAgent - LLM-powered reporting assistant with tool calling.

This package lets a conversational model answer a request directly, or call one
registered tool (e.g. a cleaning-data report lookup) and fold the result back
into a second model turn to produce the final answer.
"""

__version__ = "0.1.0"
