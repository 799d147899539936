"""Event Viewer API: read-only queries and aggregations over the event log."""
