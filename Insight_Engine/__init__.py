"""
Insight_Engine — Analytics engine for the construction-materials dashboard.

Submodules:
    - config:     Domain constants and the AnalyticsSettings policy object
    - state:      Immutable session store for the two datasets
    - processors: Ingestion + pure metric pipelines
    - dashboard:  Streamlit UI page
"""
