"""
Business Analytics — Orders and raw-material prices for a construction-materials business.

Pipeline:
    csv_ingestor -> DataStore -> analyzer -> metrics/* (on top of core/*)

Output is a Dashboard Snapshot dict of ComputationResults for the Streamlit page.
"""
