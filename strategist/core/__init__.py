"""Core orchestration package.

Composition:
    - `engine`: submission validation and outcome mapping.
    - `analysis_types`: request/outcome contracts shared with the LLM layer.

Package import itself is side-effect free.
"""
