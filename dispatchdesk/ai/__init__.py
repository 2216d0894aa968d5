"""
Project Dispatch Desk
AI module.

Submodules:
    - gateway: text-generation gateway (provider selection, failure classification)
    - prompt_registry: {{placeholder}} interpolation and default templates
    - workload: recent-activity workload scoring
    - request_tracker: per-entity request tokens (stale response guard)
    - assistants: one module per AI feature
"""
