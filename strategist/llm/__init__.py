"""LLM access package.

Architectural role:
    Provides provider settings, request dispatch, and transport adapters used by
    the core layer to obtain analysis reports.

Module split:
    - `provider_config`: settings values, defaults, and branch call configs.
    - `service`: the analysis dispatcher.
    - `client`: provider-specific HTTP/SDK transport and response parsing.
    - `errors`: exception taxonomy shared by the modules above.
"""
