"""
Minimal FastAPI service: root greeting, health/uptime and deployment smoke tests.
"""
