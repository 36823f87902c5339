"""HTTP API for the GeoTest analyzer."""
