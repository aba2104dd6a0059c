"""Streamlit UI for the Insight Engine (``streamlit run Insight_Engine/dashboard/app.py``)."""
