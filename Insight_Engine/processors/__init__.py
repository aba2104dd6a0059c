"""
Processors — Dataset-specific analytics pipelines.

    business_analytics — Orders + material prices -> Dashboard Snapshot
"""
