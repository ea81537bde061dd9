"""Settings loading and run lineage for the dual prediction simulator."""
