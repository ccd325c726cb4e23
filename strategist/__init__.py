"""Academic strategy analyst.

Turns a research field name and pasted literature metadata into a strategic
analysis report generated by a configurable LLM provider.
"""
